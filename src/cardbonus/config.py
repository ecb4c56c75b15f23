from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    log_level: str = "INFO"

    # "json" reads card_data_file, "api" talks to the remote card API.
    card_store: str = "json"
    card_data_file: str = "data/cards/cards.json"
    category_state_file: str = "data/state/categories.json"
    user_id: str = "local"

    api_base_url: str = "http://localhost:8080"
    api_key: str = ""
    api_token: str = ""
    api_timeout: float = 10.0

    telegram_bot_token: str = ""
    reminder_interval_seconds: int = 3600

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()
