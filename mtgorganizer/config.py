from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

ASSETS_DIR = Path(__file__).parent / "assets"


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env")

    app_name: str = "MTG Card Organizer"
    debug: bool = False

    scryfall_api_url: str = "https://api.scryfall.com"
    user_agent: str = "MTGOrganizer/1.0"

    # Applies to catalog lookups and image downloads alike
    request_timeout: float = 10.0

    # Catalog lookups in flight at once
    max_concurrent_lookups: int = 4

    # Scryfall asks for 50-100 ms between requests
    min_request_interval: float = 0.1

    search_limit: int = 10

    placeholder_image_path: Path = ASSETS_DIR / "placeholder.png"


settings = Settings()


# =============================================================================
# DECKLIST MESSAGES
# =============================================================================

INVALID_QUANTITY_MESSAGE = "Invalid quantity"

MISSING_NAME_MESSAGE = "Missing card name"
