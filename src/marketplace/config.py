"""
Configuration management for the marketplace demo.

Supports configuration via environment variables and .env files.
"""

from enum import Enum
from typing import Optional

from pydantic import AliasChoices, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_MARKETPLACE_ADDRESS = (
    "0x13875ee636300ec7031d1eefc82591b23263ea3665f870fb31abfd4fd713c779"
)
APTOS_COIN_TYPE = "0x1::aptos_coin::AptosCoin"


class FailurePolicy(str, Enum):
    """How the workflow reacts to a failed step."""
    BEST_EFFORT = "best_effort"   # Keep running the remaining steps
    FAIL_FAST = "fail_fast"       # Skip everything after the first failure


class MarketplaceConfig(BaseSettings):
    """
    Configuration settings for the marketplace demo.

    All settings can be configured via environment variables with the
    MARKETPLACE_ prefix. The node URL also honours APTOS_NODE_URL.
    """

    model_config = SettingsConfigDict(
        env_prefix="MARKETPLACE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Network settings
    node_url: str = Field(
        default="https://fullnode.devnet.aptoslabs.com/v1",
        validation_alias=AliasChoices("MARKETPLACE_NODE_URL", "APTOS_NODE_URL"),
        description="Aptos full node REST endpoint"
    )

    # Marketplace contract
    marketplace_address: str = Field(
        default=DEFAULT_MARKETPLACE_ADDRESS,
        description="Address the marketplace module is published under"
    )
    coin_type: str = Field(
        default=APTOS_COIN_TYPE,
        description="Coin type used to price listings"
    )

    # Seller wallet
    seller_address: Optional[str] = Field(default=None)
    seller_public_key: Optional[str] = Field(default=None)
    seller_private_key: Optional[SecretStr] = Field(default=None)
    seller_account_file: Optional[str] = Field(
        default=None,
        description="Account JSON file (alternative to inline seller keys)"
    )

    # Buyer wallet
    buyer_address: Optional[str] = Field(default=None)
    buyer_public_key: Optional[str] = Field(default=None)
    buyer_private_key: Optional[SecretStr] = Field(default=None)
    buyer_account_file: Optional[str] = Field(
        default=None,
        description="Account JSON file (alternative to inline buyer keys)"
    )

    # Collection metadata
    collection_name: str = Field(default="Long's Collection")
    collection_description: str = Field(default="Collection of Long's NFT")
    collection_uri: str = Field(default="https://gamefi.org/api/v1/boxes/9")

    # Token metadata
    token_name: str = Field(default="Long's Token")
    token_description: str = Field(default="Long's NFT")
    token_uri: str = Field(default="https://gamefi.org/api/v1/boxes/10")
    token_supply: int = Field(default=1, ge=1)

    # Listing parameters
    list_price: int = Field(
        default=100,
        ge=0,
        description="Listing price in octas"
    )
    list_expiration: int = Field(
        default=8_000_000,
        ge=0,
        description="Listing expiration passed to list_nft"
    )
    property_version: int = Field(default=0, ge=0)

    # Workflow settings
    failure_policy: FailurePolicy = Field(
        default=FailurePolicy.BEST_EFFORT,
        description="Whether later steps run after a failed step"
    )
    confirmation_timeout_seconds: int = Field(
        default=120,
        ge=1,
        description="Maximum time to wait for a transaction to commit"
    )
    poll_interval_seconds: float = Field(
        default=1.0,
        gt=0,
        description="Delay between pending-transaction polls"
    )

    # Logging settings
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    log_json: bool = Field(
        default=False,
        description="Output logs in JSON format"
    )


# Global config instance
_config: Optional[MarketplaceConfig] = None


def get_config() -> MarketplaceConfig:
    """Get or create the global configuration instance."""
    global _config
    if _config is None:
        _config = MarketplaceConfig()
    return _config


def set_config(config: MarketplaceConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
