from datetime import date

import pytest

from arthtrack.charts import templates
from arthtrack.errors import ValidationError


def _fields(refs, **overrides):
    fields = dict(
        amount=250.0,
        date=date(2025, 3, 2),
        expense_type="Want",
        category_id=refs["Want"],
        payment_type_id=refs["cash"],
    )
    fields.update(overrides)
    return fields


async def test_add_expense_encodes_date_and_defaults(tracker, refs, emitted):
    expense_id = await tracker.add_expense(**_fields(refs, note="  "))
    row = await tracker.expenses.get_expense_by_id(expense_id)
    assert row.date == "20250302"
    assert row.split == 1
    assert row.note is None
    assert len(emitted) == 1


@pytest.mark.parametrize(
    "overrides",
    [
        {"amount": 0},
        {"amount": -5},
        {"split": 0},
        {"category_id": None},
        {"payment_type_id": None},
        {"expense_type": "Luxury"},
        {"date": "20250230"},
        {"date": "2025-03-02"},
    ],
)
async def test_add_expense_rejects_invalid_input(tracker, refs, emitted, overrides):
    with pytest.raises(ValidationError):
        await tracker.add_expense(**_fields(refs, **overrides))
    assert emitted == []
    assert await tracker.expenses.count_expenses() == 0


async def test_update_expense_validates(tracker, refs):
    expense_id = await tracker.add_expense(**_fields(refs))
    with pytest.raises(ValidationError):
        await tracker.update_expense(expense_id, **_fields(refs, amount=0))

    assert await tracker.update_expense(expense_id, **_fields(refs, amount=99.5, split=3)) is True
    row = await tracker.expenses.get_expense_by_id(expense_id)
    assert row.amount == 99.5
    assert row.effective_amount == pytest.approx(33.1666, rel=1e-3)


async def test_delete_expense(tracker, refs):
    expense_id = await tracker.add_expense(**_fields(refs))
    assert await tracker.delete_expense(expense_id) is True
    assert await tracker.delete_expense(expense_id) is False


async def test_set_allocation_validates(tracker, emitted):
    with pytest.raises(ValidationError):
        await tracker.set_allocation(202503, need_amount=-1)
    with pytest.raises(ValidationError):
        await tracker.set_allocation(202513, need_amount=100)
    assert emitted == []

    await tracker.update_current_month_allocation(need_amount=10, want_amount=20, invest_amount=30)
    current = await tracker.allocations.get_current_month_allocation()
    assert (current.id, current.invest_amount) == (202503, 30.0)


async def test_category_crud(tracker):
    category_id = await tracker.add_category("  Books ", "Want")
    category = await tracker.categories.get_category_by_id(category_id)
    assert category.name == "Books"
    assert category.expense_type == "Want"

    duplicate = await tracker.add_category("Books", "Want")
    assert duplicate != category_id

    assert await tracker.update_category(category_id, "Courses", "Invest") is True
    names = [c.name for c in await tracker.categories.get_categories_by_type("Invest")]
    assert "Courses" in names

    assert await tracker.delete_category(category_id) is True
    assert category_id not in [c.id for c in await tracker.categories.get_categories()]
    assert (await tracker.categories.get_category_by_id(category_id)).is_active == 0

    assert await tracker.restore_category(category_id) is True
    assert category_id in [c.id for c in await tracker.categories.get_categories()]


async def test_category_requires_name_and_type(tracker):
    with pytest.raises(ValidationError):
        await tracker.add_category("   ", "Need")
    with pytest.raises(ValidationError):
        await tracker.add_category("Pets", "Luxury")


async def test_payment_type_names_are_unique(tracker):
    new_id = await tracker.add_payment_type("Crypto")
    assert (await tracker.payment_types.get_payment_type_by_id(new_id)).name == "Crypto"

    with pytest.raises(ValidationError):
        await tracker.add_payment_type("Crypto")
    with pytest.raises(ValidationError):
        await tracker.add_payment_type("")

    cash = await tracker.payment_types.get_payment_type_by_name("Cash")
    with pytest.raises(ValidationError):
        await tracker.update_payment_type(new_id, "Cash")
    assert await tracker.update_payment_type(cash.id, "Cash") is True


async def test_inactive_payment_type_name_stays_reserved(tracker):
    new_id = await tracker.add_payment_type("Cheque")
    await tracker.delete_payment_type(new_id)
    with pytest.raises(ValidationError):
        await tracker.add_payment_type("Cheque")
    assert await tracker.restore_payment_type(new_id) is True


async def test_last_active_payment_type_cannot_be_deleted(tracker):
    active = await tracker.payment_types.get_payment_types()
    for payment_type in active[:-1]:
        assert await tracker.delete_payment_type(payment_type.id) is True

    with pytest.raises(ValidationError):
        await tracker.delete_payment_type(active[-1].id)
    assert await tracker.payment_types.count_active() == 1
    assert await tracker.delete_payment_type(active[0].id) is False


async def test_clear_all_data_reseeds(tracker, refs, emitted):
    await tracker.add_expense(**_fields(refs))
    await tracker.set_allocation(202501, need_amount=100)
    await tracker.add_payment_type("Crypto")

    await tracker.clear_all_data()

    assert await tracker.expenses.count_expenses() == 0
    assert await tracker.allocations.get_all_allocations() == []
    assert await tracker.payment_types.get_payment_type_by_name("Crypto") is None
    assert len(await tracker.payment_types.get_payment_types()) == 6
    assert len(await tracker.categories.get_categories()) == 20
    assert len(emitted) == 3


async def test_export_data(tracker, refs):
    await tracker.add_expense(**_fields(refs))
    await tracker.set_allocation(202501, need_amount=100)

    data = await tracker.export_data()
    assert set(data) == {"categories", "payment_types", "allocations", "expenses"}
    assert len(data["expenses"]) == 1
    assert data["allocations"][0].id == 202501


async def test_database_stats(tracker, refs):
    await tracker.add_expense(**_fields(refs))
    await tracker.add_expense(**_fields(refs, date="20250210"))
    await tracker.delete_category(refs["Need"])

    stats = await tracker.get_database_stats()
    assert stats.total_expenses == 2
    assert stats.current_month_expenses == 1
    assert stats.total_categories == 19
    assert stats.total_payment_types == 6


async def test_export_csv_uses_tracker_clock(tracker, refs):
    await tracker.add_expense(**_fields(refs))
    await tracker.add_expense(**_fields(refs, date="20250210"))

    filename, text, count = await tracker.export_csv("current-month")
    assert (filename, count) == ("expenses_202503.csv", 1)
    assert "02/03/2025" in text

    filename, _, count = await tracker.export_csv("month", 202502)
    assert (filename, count) == ("expenses_202502.csv", 1)

    with pytest.raises(ValidationError):
        await tracker.export_csv("week")
    with pytest.raises(ValidationError):
        await tracker.export_csv("month")


async def test_chart_helpers_feed_ledger_data(tracker, refs, monkeypatch):
    rendered = []

    def fake_save(fig):
        rendered.append(fig)
        return "/tmp/chart.png"

    monkeypatch.setattr(templates, "_save", fake_save)

    assert await tracker.category_chart("Want") is None
    assert await tracker.trend_chart() is None

    await tracker.set_allocation(202503, need_amount=1000.0, want_amount=500.0)
    await tracker.add_expense(**_fields(refs))
    await tracker.add_expense(**_fields(refs, date="20250210", amount=100.0))

    assert await tracker.category_chart("Want", cur="INR") == "/tmp/chart.png"
    assert list(rendered[-1].data[0].labels) == ["Travel"]

    assert await tracker.trend_chart("Want", cur="INR") == "/tmp/chart.png"
    assert list(rendered[-1].data[0].x) == ["February 2025", "March 2025"]

    assert await tracker.budget_chart(cur="INR") == "/tmp/chart.png"
    assert list(rendered[-1].data[1].y) == [0.0, 250.0, 0.0]

    with pytest.raises(ValidationError):
        await tracker.category_chart("Luxury")
