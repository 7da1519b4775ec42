from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Storage for content type tables and the migration history
    DATABASE_URL: str = "sqlite:///./content.db"
    DATABASE_ECHO: bool = False

    # Comma separated list of packages scanned for content type declarations
    CONTENT_TYPE_PACKAGES: str = "content_types"

    # Upper bound for the "-1", "-2", ... slug suffix loop
    SLUG_MAX_ATTEMPTS: int = 100

    MATERIALIZE_ON_STARTUP: bool = True
    RECORD_MIGRATIONS: bool = True

    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    DEBUG: bool = False

    @property
    def content_type_packages(self) -> list[str]:
        return [
            package.strip()
            for package in self.CONTENT_TYPE_PACKAGES.split(",")
            if package.strip()
        ]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


settings = Settings()
