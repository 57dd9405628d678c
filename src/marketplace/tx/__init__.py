"""
Transaction module.

Handles payload construction, signing, and submission.
"""

from marketplace.tx.builder import MarketplacePayloadBuilder
from marketplace.tx.signer import TransactionSigner
from marketplace.tx.submitter import TransactionSubmitter

__all__ = [
    "MarketplacePayloadBuilder",
    "TransactionSigner",
    "TransactionSubmitter",
]
