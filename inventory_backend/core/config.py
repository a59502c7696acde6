import os
from dotenv import load_dotenv

load_dotenv()


class Settings:
    def __init__(self):
        self.database_url: str = os.getenv(
            "DATABASE_URL",
            "sqlite+aiosqlite:///./data.sqlite"
        )
        self.database_echo: bool = os.getenv("DATABASE_ECHO", "False").lower() == "true"

        # Actor recorded on stock changes when the request names none
        self.default_actor: str = os.getenv("DEFAULT_ACTOR", "admin")

        self.cors_origins: list[str] = [
            o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()
        ]
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self.port: int = int(os.getenv("PORT", "4000"))


def get_settings() -> Settings:
    return Settings()
