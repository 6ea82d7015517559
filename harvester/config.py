"""Configuration management from environment variables."""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load .env file
load_dotenv()

# Project root
PROJECT_ROOT = Path(__file__).parent.parent
DATA_DIR = Path(os.getenv("DATA_DIR", str(PROJECT_ROOT / "data")))

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/124.0 Safari/537.36"
)


class Config:
    """Application configuration."""

    # Run mode
    APP_ENV: str = os.getenv("APP_ENV", "production")
    IS_DEV: bool = APP_ENV == "development"

    # Sites
    OLX_URL: str = os.getenv(
        "OLX_URL",
        "https://www.olx.pl/nieruchomosci/mieszkania/wynajem/warszawa/?search%5Border%5D=created_at%3Adesc",
    )
    OTODOM_URL: str = os.getenv(
        "OTODOM_URL",
        "https://www.otodom.pl/api/v1/listings?category=flat&transaction=rent&city=warszawa&sort=newest&limit=36",
    )
    OTODOM_PAGE_SIZE: int = int(os.getenv("OTODOM_PAGE_SIZE", "36"))
    OTODOM_MAX_PAGES: int = int(os.getenv("OTODOM_MAX_PAGES", "25"))

    # Scraper
    FAN_OUT: int = int(os.getenv("FAN_OUT", "2"))
    SCRAPE_SITE_TIMEOUT: float = float(os.getenv("SCRAPE_SITE_TIMEOUT", "300"))
    MAX_BACKOFF: int = int(os.getenv("MAX_BACKOFF", "15"))
    REQUEST_TIMEOUT: float = float(os.getenv("REQUEST_TIMEOUT", "30"))
    USER_AGENT: str = os.getenv("USER_AGENT", DEFAULT_USER_AGENT)

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def site_urls(cls) -> dict[str, str]:
        """Site table: service name -> start URL."""
        return {
            "olx": cls.OLX_URL,
            "otodom": cls.OTODOM_URL,
        }

    @classmethod
    def validate(cls) -> None:
        """Validate required configuration."""
        errors = []
        for name, url in cls.site_urls().items():
            if not url:
                errors.append(f"{name.upper()}_URL is required")
        if cls.SCRAPE_SITE_TIMEOUT <= 0:
            errors.append("SCRAPE_SITE_TIMEOUT must be positive")
        if cls.FAN_OUT < 1:
            errors.append("FAN_OUT must be at least 1")
        if cls.MAX_BACKOFF < 1:
            errors.append("MAX_BACKOFF must be at least 1")
        if errors:
            raise ValueError(f"Configuration errors: {', '.join(errors)}")


config = Config()
