from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    APP_NAME: str = "HSE Record Management"
    VERSION: str = "1.0.0"

    # In-memory by default: a restart drops every record
    DATABASE_URL: str = "sqlite://"

    SEED_DEMO_DATA: bool = True
    LOG_LEVEL: str = "INFO"

    CORS_ORIGINS: str = "*"

    # Occupational medicine
    DUE_CHECKUPS_LIMIT: int = 10

    # Write an AuditLog row for every request touching medical data
    AUDIT_MEDICAL_ACCESS: bool = True

    class Config:
        env_file = ".env"


settings = Settings()
