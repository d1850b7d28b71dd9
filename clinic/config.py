from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App config
    API_VERSION: str = "1.0.0"
    API_TITLE: str = "Clinic API"
    BASE_URL: str = "/api"
    LOG_LEVEL: str = "INFO"
    LOG_DIR: str = "."
    LOG_FILE: str = "app.log"
    ERROR_LOG_FILE: str = "app-error.log"
    INIT_LOG_FILE: str = "init_app.log"

    API_SECRET: str = "change-me"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60

    # Storage config
    STORE_BACKEND: str = "memory"

    DATABASE_URL: str | None = None
    DATABASE_USERNAME: str = "postgres"
    DATABASE_PASSWORD: str = "postgres"
    DATABASE_HOSTNAME: str = "localhost"
    DATABASE_PORT: str = "5432"
    DATABASE_NAME: str = "clinic"

    # Dashboard config
    STATS_CACHE_TTL_SECONDS: int = 300
    MAX_LISTED_USERS: int = 100

    # Bootstrap config
    DEFAULT_ADMIN_EMAIL: str = "admin@clinic-example.com"
    DEFAULT_ADMIN_NAME: str = "Administrator"

    model_config = SettingsConfigDict(env_file=".env")


settings = Settings()
