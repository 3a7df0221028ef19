"""Process configuration, read once at startup and passed to every component."""
import os
from dataclasses import dataclass

from dotenv import load_dotenv

DEFAULT_PORT = 7378
DEFAULT_API_URL = "https://api.openserv.ai"


def _port(raw: str | None) -> int:
    try:
        return int(raw) if raw else DEFAULT_PORT
    except ValueError:
        return DEFAULT_PORT


@dataclass(frozen=True)
class Settings:
    openserv_api_key: str | None = None
    firecrawl_api_key: str | None = None
    port: int = DEFAULT_PORT
    openserv_api_url: str = DEFAULT_API_URL
    model: str = "gpt-4o"
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build settings from the environment, loading `.env` first unless disabled."""
        if dotenv:
            load_dotenv()
        return cls(
            openserv_api_key=os.getenv("OPENSERV_API_KEY"),
            firecrawl_api_key=os.getenv("FIRECRAWL_API_KEY"),
            port=_port(os.getenv("PORT")),
            openserv_api_url=os.getenv("OPENSERV_API_URL", DEFAULT_API_URL).rstrip("/"),
            model=os.getenv("MODEL", "gpt-4o"),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
        )

    def missing_keys(self) -> list[str]:
        missing = []
        if not self.openserv_api_key:
            missing.append("OPENSERV_API_KEY")
        if not self.firecrawl_api_key:
            missing.append("FIRECRAWL_API_KEY")
        return missing
