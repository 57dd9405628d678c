"""
Pytest configuration and shared fixtures for the test suite.
"""

from typing import Any, Dict, List, Optional, Tuple

import pytest

from marketplace.config import MarketplaceConfig
from marketplace.core.assets import CollectionDescriptor, TokenDescriptor
from marketplace.core.identity import WalletIdentity, WalletPair
from marketplace.core.payload import EntryFunctionCall
from marketplace.exceptions import TransactionRejected
from marketplace.node.interface import NodeInterface


SELLER_ADDRESS = "0x" + "a1" * 32
BUYER_ADDRESS = "0x" + "b2" * 32


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def test_config() -> MarketplaceConfig:
    """Create a test configuration."""
    return MarketplaceConfig(
        _env_file=None,
        node_url="http://localhost:8080/v1",
        seller_address=SELLER_ADDRESS,
        seller_public_key="0x" + "11" * 32,
        seller_private_key="0x" + "22" * 32,
        buyer_address=BUYER_ADDRESS,
        buyer_public_key="0x" + "33" * 32,
        buyer_private_key="0x" + "44" * 32,
        confirmation_timeout_seconds=5,
        poll_interval_seconds=0.01,
        log_level="DEBUG",
    )


# ============================================================================
# Test Data
# ============================================================================

def generate_test_tx_hash(index: int = 0) -> str:
    """Generate a deterministic test transaction hash."""
    return "0x" + ("abcd1234" * 8)[:60] + f"{index:04d}"


@pytest.fixture
def seller() -> WalletIdentity:
    return WalletIdentity(
        address=SELLER_ADDRESS,
        public_key="0x" + "11" * 32,
        private_key="0x" + "22" * 32,
        label="seller",
    )


@pytest.fixture
def buyer() -> WalletIdentity:
    return WalletIdentity(
        address=BUYER_ADDRESS,
        public_key="0x" + "33" * 32,
        private_key="0x" + "44" * 32,
        label="buyer",
    )


@pytest.fixture
def wallets(seller, buyer) -> WalletPair:
    return WalletPair(seller=seller, buyer=buyer)


@pytest.fixture
def collection() -> CollectionDescriptor:
    return CollectionDescriptor(
        name="Test Collection",
        description="Collection of test NFTs",
        uri="https://example.com/collection/1",
    )


@pytest.fixture
def token() -> TokenDescriptor:
    return TokenDescriptor(
        name="Test Token",
        description="A test NFT",
        uri="https://example.com/token/1",
        supply=1,
    )


# ============================================================================
# Mock Node Interface
# ============================================================================

class MockNodeInterface(NodeInterface):
    """
    Mock node interface for testing.

    Records every call in ``calls`` as ``(operation, details)`` and accepts
    everything unless an operation is listed in ``failures``.
    """

    def __init__(self, balance: int = 100_000_000):
        self.balance = balance
        self.calls: List[Tuple[str, Dict[str, Any]]] = []
        self.failures: Dict[str, Exception] = {}
        self.submitted_txs: List[str] = []
        self._connected = False
        self._counter = 0

    def fail(self, operation: str, error: Optional[Exception] = None) -> None:
        """Make an operation raise."""
        self.failures[operation] = error or TransactionRejected(f"{operation} rejected")

    def _record(self, operation: str, **details) -> None:
        self.calls.append((operation, details))
        if operation in self.failures:
            raise self.failures[operation]

    def _next_hash(self) -> str:
        self._counter += 1
        return generate_test_tx_hash(self._counter)

    @property
    def operations(self) -> List[str]:
        return [name for name, _ in self.calls]

    async def connect(self) -> None:
        self._connected = True

    async def disconnect(self) -> None:
        self._connected = False

    async def get_balance(self, identity: WalletIdentity) -> int:
        self._record("get_balance", address=identity.address)
        return self.balance

    async def create_collection(self, identity, collection) -> str:
        self._record("create_collection", sender=identity.address, collection=collection)
        return self._next_hash()

    async def create_token(self, identity, collection_name, token) -> str:
        self._record(
            "create_token",
            sender=identity.address,
            collection_name=collection_name,
            token=token,
        )
        return self._next_hash()

    async def generate_transaction(self, sender_address: str, payload: EntryFunctionCall) -> dict:
        self._record("generate_transaction", sender=sender_address, payload=payload)
        return {"sender": sender_address, "payload": payload}

    async def sign_transaction(self, identity, raw_transaction) -> dict:
        self._record("sign_transaction", sender=identity.address)
        return {"raw": raw_transaction, "signed_by": identity.address}

    async def submit_transaction(self, signed_transaction) -> str:
        self._record("submit_transaction", signed=signed_transaction)
        tx_hash = self._next_hash()
        self.submitted_txs.append(tx_hash)
        return tx_hash

    async def wait_for_transaction(self, tx_hash: str, check_success: bool = True) -> dict:
        self._record("wait_for_transaction", tx_hash=tx_hash, check_success=check_success)
        return {"hash": tx_hash, "success": True, "vm_status": "Executed successfully"}

    def payloads(self) -> List[EntryFunctionCall]:
        """Payloads passed to generate_transaction, in order."""
        return [d["payload"] for name, d in self.calls if name == "generate_transaction"]


@pytest.fixture
def mock_node() -> MockNodeInterface:
    """Create a mock node interface."""
    return MockNodeInterface()
