from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class ProxySettings(BaseSettings):
    NOTION_TOKEN: str = ""
    NOTION_DATABASE_ID: str = ""
    CORS_ORIGIN: str = "http://localhost:5173"
    PORT: int = 5174
    HOST: str = "127.0.0.1"

    # Database property names
    DATE_PROPERTY: str = "Date & Time"
    LENGTH_PROPERTY: str = "Time Estimate"
    TITLE_PROPERTY: str = "Name"

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("NOTION_TOKEN", "NOTION_DATABASE_ID", "CORS_ORIGIN", mode="before")
    @classmethod
    def _strip(cls, v):
        return v.strip() if isinstance(v, str) else v

    def redacted(self) -> dict:
        """Settings safe to log or return from debug endpoints."""
        return {
            "DB_ID": self.NOTION_DATABASE_ID,
            "tokenPrefix": self.NOTION_TOKEN[:4],
            "tokenLen": len(self.NOTION_TOKEN),
            "CORS_ORIGIN": self.CORS_ORIGIN,
            "PORT": self.PORT,
        }


@lru_cache(maxsize=1)
def get_settings() -> ProxySettings:
    return ProxySettings()
