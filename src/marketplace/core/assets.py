"""
Asset descriptors.

Immutable metadata for the collection and token the workflow creates.
"""

from dataclasses import dataclass

from marketplace.config import MarketplaceConfig


@dataclass(frozen=True)
class CollectionDescriptor:
    """Metadata for an NFT collection. The name identifies it in later calls."""

    name: str
    description: str
    uri: str

    @classmethod
    def from_config(cls, config: MarketplaceConfig) -> "CollectionDescriptor":
        return cls(
            name=config.collection_name,
            description=config.collection_description,
            uri=config.collection_uri,
        )


@dataclass(frozen=True)
class TokenDescriptor:
    """Metadata for a token minted into a collection."""

    name: str
    description: str
    uri: str
    supply: int = 1
    royalty_points_per_million: int = 0

    def __post_init__(self):
        """Validate after initialization."""
        if self.supply < 1:
            raise ValueError(f"Token supply must be at least 1, got {self.supply}")
        if self.royalty_points_per_million < 0:
            raise ValueError("Royalty points cannot be negative")

    @classmethod
    def from_config(cls, config: MarketplaceConfig) -> "TokenDescriptor":
        return cls(
            name=config.token_name,
            description=config.token_description,
            uri=config.token_uri,
            supply=config.token_supply,
        )
