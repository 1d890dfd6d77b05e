from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    # how long after addedAt a line item still counts as "new"
    RECENT_WINDOW_SECONDS: int = 60

    FRAUD_REFERENCE_CURRENCY: str = "EUR"
    FRAUD_MAX_ITEM_COUNT: int = 10
    FRAUD_MAX_PRE_TAX_CENT_AMOUNT: int = 50000

    STOCK_TYPE_KEY: str = "external-lineitem-info"

    # value the platform sends in the Authorization header; unset disables the check
    EXTENSION_AUTH_HEADER: str | None = None

    LOG_LEVEL: str = "INFO"

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
