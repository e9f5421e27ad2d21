from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARDSIFTER_")

    app_name: str = "CardSifter"
    debug: bool = False

    # Rows per page when a session starts
    default_page_size: int = 10
    page_size_choices: tuple[int, ...] = (10, 25, 50, 100)

    # Filename hint handed to the download sink
    export_filename: str = "card_codes.txt"

    # Optional proxy for fetching a dataset by URL (empty = direct)
    http_proxy: str = ""
    fetch_timeout: float = 30.0


settings = Settings()


# =============================================================================
# EXPORT LIMITS
# =============================================================================

# Records per "Copy 50" action
BULK_BATCH_SIZE = 50

# Records per "Copy 1" action
SINGLE_BATCH_SIZE = 1

# Codes per line in the downloaded text file
EXPORT_GROUP_SIZE = 50


# =============================================================================
# SORTING
# =============================================================================

# Fields compared as integers; everything else compares as text
NUMERIC_SORT_FIELDS: frozenset[str] = frozenset({"number", "wishlists", "edition", "worker.effort"})
