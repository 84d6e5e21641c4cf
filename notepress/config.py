from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    database_url: str = "data/notepress.db"
    host: str = "0.0.0.0"
    port: int = 8000
    site_title: str = "Notepress"
    session_secret: str | None = None
    session_max_age_seconds: int = 86400
    min_password_length: int = 4
    categories: list[str] = ["math", "cp"]
    difficulties: list[str] = ["easy", "medium", "hard"]
    default_category: str = "math"
    default_difficulty: str = "medium"
    max_tags: int = 20
    rate_limit_login: str = "10/minute"
    rate_limit_write: str = "60/minute"
    rate_limit_read: str = "120/minute"
    page_size: int = 50

    model_config = {"env_prefix": "NOTEPRESS_"}


settings = Settings()
