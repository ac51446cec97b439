from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    PROJECT_TITLE: str = "Island HR"
    MONGODB_URL: str = "mongodb://localhost:27017"
    DATABASE_NAME: str = "island_hr"
    PRODUCTION_MODE: bool = False
    SECRET_KEY: str = "dev-secret-key"
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 60 * 24
    TIMEZONE: str = "Indian/Maldives"
    WEEKLY_OFF_DAY: str = "FRIDAY"
    HOLIDAYS_FILE: str = ""  # empty means the bundled 2025 calendar
    ALLOW_SINGLE_DAY_LEAVE: bool = False
    INSURANCE_EXPIRY_WINDOW_DAYS: int = 30
    MAX_RANGE_DAYS: int = 366  # longest inclusive span a leave or business-day query may cover

    class Config:
        env_file = ".env"

settings = Settings()
