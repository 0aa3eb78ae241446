from arthtrack.db.models import ExpenseType

DEFAULT_CATEGORIES: dict[ExpenseType, list[str]] = {
    ExpenseType.NEED: [
        "Room Rent",
        "Daily Food",
        "Eggs",
        "Protein",
        "Multivitamin",
        "Daily Transport",
        "Wifi",
        "Recharge",
        "Mobile Recharge",
        "Gym",
        "Daily Use",
    ],
    ExpenseType.WANT: [
        "Food",
        "Travel",
        "Skills",
        "Outfits",
        "Others",
        "Trip",
    ],
    ExpenseType.INVEST: [
        "SIP",
        "Stocks",
        "Mutual Fund",
    ],
}

DEFAULT_PAYMENT_TYPES: list[str] = [
    "Cash",
    "Credit Card",
    "Debit Card",
    "UPI",
    "Net Banking",
    "Digital Wallet",
]

EXPENSE_TYPE_COLORS: dict[ExpenseType, str] = {
    ExpenseType.NEED: "#10B981",
    ExpenseType.WANT: "#F59E0B",
    ExpenseType.INVEST: "#3B82F6",
}
