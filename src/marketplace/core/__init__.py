"""
Core marketplace components.

This module contains the wallet and asset models, the payload and result
types, and the workflow orchestration.
"""

from marketplace.core.identity import WalletIdentity, WalletPair
from marketplace.core.assets import CollectionDescriptor, TokenDescriptor
from marketplace.core.payload import EntryFunctionCall, MoveArgument, ListNftArgs, BuyTokenArgs
from marketplace.core.record import TransactionRecord, StepResult, WorkflowReport
from marketplace.core.workflow import WorkflowOrchestrator

__all__ = [
    "WalletIdentity",
    "WalletPair",
    "CollectionDescriptor",
    "TokenDescriptor",
    "EntryFunctionCall",
    "MoveArgument",
    "ListNftArgs",
    "BuyTokenArgs",
    "TransactionRecord",
    "StepResult",
    "WorkflowReport",
    "WorkflowOrchestrator",
]
