"""
Error taxonomy for the marketplace demo.
"""

from typing import Optional


class MarketplaceError(Exception):
    """Base error for the marketplace package."""
    pass


class ConfigurationError(MarketplaceError):
    """Raised when required settings or credentials are missing."""
    pass


class NetworkError(MarketplaceError):
    """Raised when the node is unreachable or does not answer in time."""
    pass


class TransactionRejected(MarketplaceError):
    """Raised when the node refuses or aborts a transaction."""

    def __init__(
        self,
        message: str,
        vm_status: Optional[str] = None,
        tx_hash: Optional[str] = None,
    ):
        super().__init__(message)
        self.vm_status = vm_status
        self.tx_hash = tx_hash


class SigningError(MarketplaceError):
    """Raised when key material cannot produce a valid signature."""
    pass


class PayloadError(MarketplaceError):
    """Raised when an entry function argument is out of range."""
    pass
