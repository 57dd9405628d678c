"""
Wallet identity model.

Holds the address and key material of one marketplace participant, and the
providers that supply those identities to the workflow.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import structlog
from aptos_sdk.account import Account

from marketplace.config import MarketplaceConfig, get_config
from marketplace.exceptions import ConfigurationError

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class WalletIdentity:
    """
    Address plus key material for one participant.

    The key material is assumed to match the address; that was established
    when the wallet was provisioned and is not re-checked here.

    Attributes:
        address: Account address (0x-prefixed hex)
        public_key: Ed25519 public key in hex
        private_key: Ed25519 private key in hex
        label: Role of the wallet in the workflow ("seller", "buyer")
    """

    address: str
    public_key: str
    private_key: str = field(repr=False)
    label: str = "wallet"

    @property
    def short_address(self) -> str:
        """Address truncated for log output."""
        return self.address[:10] + "..."


@dataclass(frozen=True)
class WalletPair:
    """The two identities taking part in a marketplace run."""

    seller: WalletIdentity
    buyer: WalletIdentity


def load_identity_from_file(path: str, label: str) -> WalletIdentity:
    """
    Load an identity from an account JSON file.

    The file is the SDK account format with ``account_address`` and
    ``private_key`` keys; the public key is derived from the private key.

    Args:
        path: Path to the account file
        label: Role of the wallet

    Returns:
        WalletIdentity read from the file
    """
    if not Path(path).exists():
        raise ConfigurationError(f"Account file not found: {path}")

    try:
        account = Account.load(path)
    except KeyError as e:
        raise ConfigurationError(f"Account file {path} is missing {e}")
    except (OSError, ValueError, TypeError) as e:
        raise ConfigurationError(f"Invalid account file {path}: {e}")

    identity = WalletIdentity(
        address=str(account.address()),
        public_key=str(account.public_key()),
        private_key=account.private_key.hex(),
        label=label,
    )

    logger.info("identity_loaded_from_file", label=label, address=identity.short_address)
    return identity


class IdentityProvider(ABC):
    """Source of the seller and buyer identities."""

    @abstractmethod
    def get_wallets(self) -> WalletPair:
        """Return the seller and buyer identities."""
        pass


class StaticIdentityProvider(IdentityProvider):
    """Provider over identities that were constructed by the caller."""

    def __init__(self, seller: WalletIdentity, buyer: WalletIdentity):
        self._wallets = WalletPair(seller=seller, buyer=buyer)

    def get_wallets(self) -> WalletPair:
        return self._wallets


class ConfigIdentityProvider(IdentityProvider):
    """
    Reads identities from configuration.

    Each wallet is taken from its account file when one is configured,
    otherwise from the inline address and key settings.
    """

    def __init__(self, config: Optional[MarketplaceConfig] = None):
        self.config = config or get_config()

    def get_wallets(self) -> WalletPair:
        return WalletPair(
            seller=self._load("seller"),
            buyer=self._load("buyer"),
        )

    def _load(self, role: str) -> WalletIdentity:
        account_file = getattr(self.config, f"{role}_account_file")
        if account_file:
            return load_identity_from_file(account_file, role)

        address = getattr(self.config, f"{role}_address")
        public_key = getattr(self.config, f"{role}_public_key")
        private_key = getattr(self.config, f"{role}_private_key")

        if not address or private_key is None or not private_key.get_secret_value():
            raise ConfigurationError(
                f"No {role} wallet configured: set MARKETPLACE_{role.upper()}_ADDRESS "
                f"and MARKETPLACE_{role.upper()}_PRIVATE_KEY, "
                f"or MARKETPLACE_{role.upper()}_ACCOUNT_FILE"
            )

        return WalletIdentity(
            address=address,
            public_key=public_key or "",
            private_key=private_key.get_secret_value(),
            label=role,
        )
