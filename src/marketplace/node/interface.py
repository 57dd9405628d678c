"""
Abstract interface for Aptos node integration.

Defines the contract for blockchain access that all node adapters must implement.
"""

from abc import ABC, abstractmethod
from typing import Any

from marketplace.core.assets import CollectionDescriptor, TokenDescriptor
from marketplace.core.identity import WalletIdentity
from marketplace.core.payload import EntryFunctionCall
from marketplace.exceptions import (
    MarketplaceError,
    NetworkError,
    SigningError,
    TransactionRejected,
)


class NodeInterface(ABC):
    """
    Abstract interface for Aptos node access.

    This interface defines all blockchain operations needed by the workflow:
    - Balance queries
    - Collection and token creation helpers
    - The generate / sign / submit / wait transaction protocol
    """

    @abstractmethod
    async def connect(self) -> None:
        """
        Establish connection to the node.

        Raises:
            NetworkError: If the node cannot be reached
        """
        pass

    @abstractmethod
    async def disconnect(self) -> None:
        """Close connection to the node."""
        pass

    @abstractmethod
    async def get_balance(self, identity: WalletIdentity) -> int:
        """
        Get the native coin balance of an account.

        Args:
            identity: Wallet to query

        Returns:
            Balance in octas
        """
        pass

    @abstractmethod
    async def create_collection(
        self,
        identity: WalletIdentity,
        collection: CollectionDescriptor,
    ) -> str:
        """
        Submit a collection creation transaction.

        Args:
            identity: Creator of the collection
            collection: Collection metadata

        Returns:
            Hash of the pending transaction
        """
        pass

    @abstractmethod
    async def create_token(
        self,
        identity: WalletIdentity,
        collection_name: str,
        token: TokenDescriptor,
    ) -> str:
        """
        Submit a token creation transaction.

        Args:
            identity: Creator of the collection
            collection_name: Collection to mint into
            token: Token metadata

        Returns:
            Hash of the pending transaction
        """
        pass

    @abstractmethod
    async def generate_transaction(
        self,
        sender_address: str,
        payload: EntryFunctionCall,
    ) -> Any:
        """
        Obtain an unsigned raw transaction.

        The node fills in sequence number, gas and expiration.

        Args:
            sender_address: Account sending the transaction
            payload: Entry function to call

        Returns:
            Raw transaction ready for signing
        """
        pass

    @abstractmethod
    async def sign_transaction(self, identity: WalletIdentity, raw_transaction: Any) -> Any:
        """
        Sign a raw transaction.

        Raises:
            SigningError: If the key material cannot be used
        """
        pass

    @abstractmethod
    async def submit_transaction(self, signed_transaction: Any) -> str:
        """
        Submit a signed transaction to the network.

        Returns:
            Hash of the pending transaction

        Raises:
            TransactionRejected: If the node refuses the transaction
        """
        pass

    @abstractmethod
    async def wait_for_transaction(
        self,
        tx_hash: str,
        check_success: bool = True,
    ) -> dict:
        """
        Wait for a transaction to be committed.

        Args:
            tx_hash: Hash of the transaction to monitor
            check_success: Raise if the committed transaction aborted

        Returns:
            The committed transaction as reported by the node

        Raises:
            NetworkError: If the transaction is not committed in time
            TransactionRejected: If check_success is set and the transaction failed
        """
        pass


__all__ = [
    "NodeInterface",
    "MarketplaceError",
    "NetworkError",
    "SigningError",
    "TransactionRejected",
]
