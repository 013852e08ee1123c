from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    # Engine
    max_schedule_months: int = 600  # 50 years; hard cap for reduce-term tails
    reject_interest_increase: bool = True
    apr_method: str = "cash_flow"  # "cash_flow" or "level_payment"

    # App
    debug: bool = False
    log_level: str = "INFO"


settings = Settings()
