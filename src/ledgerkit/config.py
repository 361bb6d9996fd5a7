"""Runtime settings read from the environment."""

from decimal import Decimal

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_BANK_ACCOUNT = "1100"
DEFAULT_PRECISION = 2
DEFAULT_COMPANY_ID = 1

# Decimal places of the money columns; amounts finer than this cannot be stored
MONEY_SCALE = 2


class PostingSettings(BaseSettings):
    """Settings used by the ledger poster.

    Read from LEDGERKIT_BANK_ACCOUNT and LEDGERKIT_PRECISION unless passed in.

    Attributes:
        bank_account_code: Clearing/bank account that offsets every bank transaction
        precision: Number of decimal places of the currency's minor unit
    """

    model_config = SettingsConfigDict(
        env_prefix="LEDGERKIT_",
        extra="ignore",
        frozen=True,
    )

    bank_account_code: str = Field(
        default=DEFAULT_BANK_ACCOUNT,
        min_length=1,
        validation_alias=AliasChoices("bank_account_code", "LEDGERKIT_BANK_ACCOUNT"),
    )
    precision: int = Field(
        default=DEFAULT_PRECISION,
        ge=0,
        le=MONEY_SCALE,
        description="Decimal places of the minor unit, at most the stored scale",
    )

    @property
    def quantum(self) -> Decimal:
        """Smallest representable amount, e.g. ``Decimal("0.01")``."""
        return Decimal(1).scaleb(-self.precision)

    @classmethod
    def from_env(cls) -> "PostingSettings":
        """Build settings from the environment only."""
        return cls()
