"""Runtime configuration read from the environment."""

from pathlib import Path

from loguru import logger
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Default data directory
DATA_DIR = Path(__file__).parent.parent.parent / "data"

DEFAULT_ACCOUNT = "local"
DEFAULT_LOOKBACK_WEEKS = 4
DEFAULT_FAVORITES_DEBOUNCE_MS = 150


class Settings(BaseSettings):
    """Tracker settings, read from LIFESTYLE_TRACKER_* environment variables.

    Attributes:
        data_dir: Directory holding the SQLite document store
        account_id: Account whose documents are read and written
        lookback_weeks: Number of prior weeks loaded for history
        favorites_debounce_ms: Delay before favorites cache listeners fire
    """

    data_dir: Path = DATA_DIR
    account_id: str = Field(
        default=DEFAULT_ACCOUNT,
        validation_alias=AliasChoices("account_id", "LIFESTYLE_TRACKER_ACCOUNT"),
    )
    lookback_weeks: int = Field(default=DEFAULT_LOOKBACK_WEEKS, ge=0)
    favorites_debounce_ms: int = Field(default=DEFAULT_FAVORITES_DEBOUNCE_MS, ge=0)

    @field_validator("account_id")
    @classmethod
    def validate_account_id(cls, value: str) -> str:
        """Strip the account id and reject blank ones."""
        account = value.strip()
        if not account:
            logger.warning("LIFESTYLE_TRACKER_ACCOUNT is blank")
            raise ValueError("LIFESTYLE_TRACKER_ACCOUNT must not be empty")
        return account

    @property
    def favorites_debounce_seconds(self) -> float:
        return self.favorites_debounce_ms / 1000

    model_config = SettingsConfigDict(env_prefix="LIFESTYLE_TRACKER_")
