"""
Node Integration Layer.

Provides abstracted access to the Aptos blockchain and transaction submission.
"""

from marketplace.node.interface import NodeInterface
from marketplace.node.aptos import AptosRestAdapter

__all__ = [
    "NodeInterface",
    "AptosRestAdapter",
]
