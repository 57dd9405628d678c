"""
Aptos Marketplace Demo

Drives an on-chain NFT marketplace from two wallets: create a collection,
mint a token into it, list the token for sale and buy it.
"""

__version__ = "0.1.0"

from marketplace.core.workflow import WorkflowOrchestrator
from marketplace.core.identity import WalletIdentity, WalletPair
from marketplace.core.assets import CollectionDescriptor, TokenDescriptor
from marketplace.core.record import StepResult, StepStatus, TransactionRecord, WorkflowReport

__all__ = [
    "WorkflowOrchestrator",
    "WalletIdentity",
    "WalletPair",
    "CollectionDescriptor",
    "TokenDescriptor",
    "StepResult",
    "StepStatus",
    "TransactionRecord",
    "WorkflowReport",
]
