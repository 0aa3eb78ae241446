from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "env_prefix": "ARTHTRACK_",
        "extra": "ignore",
    }

    db_path: str = "arthtrack.db"
    currency_code: str = "INR"
    debug: bool = False

    @field_validator("currency_code", mode="before")
    @classmethod
    def normalize_currency(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


settings = Settings()
