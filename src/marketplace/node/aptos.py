"""
Aptos REST adapter for node integration.

Provides blockchain access via the Aptos SDK's REST client and its token
helpers.
"""

import asyncio
from typing import Any, Awaitable, Optional, TypeVar

import httpx
import structlog

from aptos_sdk.account_address import AccountAddress
from aptos_sdk.aptos_tokenv1_client import AptosTokenV1Client
from aptos_sdk.async_client import ApiError, RestClient
from aptos_sdk.bcs import Serializer
from aptos_sdk.transactions import (
    EntryFunction,
    RawTransaction,
    SignedTransaction,
    TransactionArgument,
    TransactionPayload,
)
from aptos_sdk.type_tag import StructTag, TypeTag

from marketplace.config import MarketplaceConfig, get_config
from marketplace.core.assets import CollectionDescriptor, TokenDescriptor
from marketplace.core.identity import WalletIdentity
from marketplace.core.payload import EntryFunctionCall, MoveArgument, MoveType
from marketplace.exceptions import (
    NetworkError,
    PayloadError,
    TransactionRejected,
)
from marketplace.node.interface import NodeInterface
from marketplace.tx.signer import TransactionSigner, parse_address

logger = structlog.get_logger(__name__)

T = TypeVar("T")


def to_transaction_argument(argument: MoveArgument) -> TransactionArgument:
    """Convert a typed argument into its BCS transaction argument."""
    if argument.move_type == MoveType.ADDRESS:
        try:
            address = AccountAddress.from_str(argument.value)
        except Exception as e:
            raise PayloadError(f"{argument.name} is not a valid address: {e}")
        return TransactionArgument(address, Serializer.struct)
    if argument.move_type == MoveType.STRING:
        return TransactionArgument(argument.value, Serializer.str)
    if argument.move_type == MoveType.U64:
        return TransactionArgument(argument.value, Serializer.u64)
    raise PayloadError(f"Unsupported argument type: {argument.move_type}")


def to_transaction_payload(call: EntryFunctionCall) -> TransactionPayload:
    """Convert an entry function call into a BCS transaction payload."""
    type_arguments = [TypeTag(StructTag.from_str(t)) for t in call.type_arguments]
    arguments = [to_transaction_argument(a) for a in call.arguments]
    return TransactionPayload(
        EntryFunction.natural(call.module, call.function_name, type_arguments, arguments)
    )


class AptosRestAdapter(NodeInterface):
    """
    Aptos REST API adapter.

    Implements the NodeInterface using the SDK's asynchronous RestClient.
    """

    def __init__(
        self,
        config: Optional[MarketplaceConfig] = None,
        signer: Optional[TransactionSigner] = None,
        client: Optional[RestClient] = None,
    ):
        """
        Initialize the Aptos adapter.

        Args:
            config: Marketplace configuration. Uses global config if not provided.
            signer: Transaction signer for wallet identities
            client: Pre-built REST client (created on connect if not provided)
        """
        self.config = config or get_config()
        self.base_url = self.config.node_url
        self.signer = signer or TransactionSigner()
        self._client: Optional[RestClient] = client
        self._token_client: Optional[AptosTokenV1Client] = (
            AptosTokenV1Client(client) if client is not None else None
        )

    async def connect(self) -> None:
        """Establish connection (create the REST client)."""
        if self._client is not None:
            return

        self._client = RestClient(self.base_url)
        self._token_client = AptosTokenV1Client(self._client)

        # Test connection
        info = await self._request("ledger_info", self._client.info())
        logger.info(
            "aptos_connected",
            node_url=self.base_url,
            chain_id=info.get("chain_id"),
            ledger_version=info.get("ledger_version"),
        )

    async def disconnect(self) -> None:
        """Close the REST client."""
        if self._client:
            await self._client.close()
            self._client = None
            self._token_client = None
            logger.info("aptos_disconnected")

    async def _ensure_client(self) -> RestClient:
        if not self._client:
            await self.connect()
        return self._client

    async def _request(self, operation: str, call: Awaitable[T]) -> T:
        """Await an SDK call, translating its errors into the marketplace taxonomy."""
        try:
            return await call
        except ApiError as e:
            status = getattr(e, "status_code", None)
            logger.error("aptos_request_failed", operation=operation, status=status, error=str(e))
            if status is not None and status >= 500:
                raise NetworkError(f"Aptos node error during {operation}: {e}")
            raise TransactionRejected(f"Aptos node rejected {operation}: {e}")
        except httpx.HTTPError as e:
            logger.error("aptos_request_error", operation=operation, error=str(e))
            raise NetworkError(f"Aptos request failed during {operation}: {e}")

    async def get_balance(self, identity: WalletIdentity) -> int:
        """Get the native coin balance of an account."""
        client = await self._ensure_client()
        address = parse_address(identity.address)
        balance = await self._request("account_balance", client.account_balance(address))
        logger.debug("balance_fetched", address=identity.short_address, balance=balance)
        return int(balance)

    async def create_collection(
        self,
        identity: WalletIdentity,
        collection: CollectionDescriptor,
    ) -> str:
        """Submit a collection creation via the token helper."""
        await self._ensure_client()
        account = self.signer.account_for(identity)
        tx_hash = await self._request(
            "create_collection",
            self._token_client.create_collection(
                account,
                collection.name,
                collection.description,
                collection.uri,
            ),
        )
        logger.info("collection_submitted", collection=collection.name, tx_hash=tx_hash)
        return tx_hash

    async def create_token(
        self,
        identity: WalletIdentity,
        collection_name: str,
        token: TokenDescriptor,
    ) -> str:
        """Submit a token creation via the token helper."""
        await self._ensure_client()
        account = self.signer.account_for(identity)
        tx_hash = await self._request(
            "create_token",
            self._token_client.create_token(
                account,
                collection_name,
                token.name,
                token.description,
                token.supply,
                token.uri,
                token.royalty_points_per_million,
            ),
        )
        logger.info("token_submitted", collection=collection_name, token=token.name, tx_hash=tx_hash)
        return tx_hash

    async def generate_transaction(
        self,
        sender_address: str,
        payload: EntryFunctionCall,
    ) -> RawTransaction:
        """Build a raw transaction with the node's sequence number and chain id."""
        client = await self._ensure_client()
        sender = parse_address(sender_address)
        transaction_payload = to_transaction_payload(payload)
        return await self._request(
            "generate_transaction",
            client.create_bcs_transaction(sender, transaction_payload),
        )

    async def sign_transaction(
        self,
        identity: WalletIdentity,
        raw_transaction: RawTransaction,
    ) -> SignedTransaction:
        """Sign locally with the identity's key."""
        return self.signer.sign_transaction(identity, raw_transaction)

    async def submit_transaction(self, signed_transaction: SignedTransaction) -> str:
        """Submit a signed transaction."""
        client = await self._ensure_client()
        tx_hash = await self._request(
            "submit_transaction",
            client.submit_bcs_transaction(signed_transaction),
        )
        logger.info("tx_submitted", tx_hash=tx_hash)
        return tx_hash

    async def wait_for_transaction(
        self,
        tx_hash: str,
        check_success: bool = True,
    ) -> dict:
        """Poll until the transaction leaves the pending state."""
        client = await self._ensure_client()
        loop = asyncio.get_running_loop()
        start_time = loop.time()

        while await self._request("transaction_pending", client.transaction_pending(tx_hash)):
            if loop.time() - start_time > self.config.confirmation_timeout_seconds:
                logger.warning("tx_confirmation_timeout", tx_hash=tx_hash)
                raise NetworkError(f"Transaction {tx_hash} not committed within timeout")
            await asyncio.sleep(self.config.poll_interval_seconds)

        receipt: Any = await self._request(
            "transaction_by_hash",
            client.transaction_by_hash(tx_hash),
        )

        if check_success and not receipt.get("success", False):
            vm_status = receipt.get("vm_status")
            logger.warning("tx_failed_on_chain", tx_hash=tx_hash, vm_status=vm_status)
            raise TransactionRejected(
                f"Transaction {tx_hash} failed: {vm_status}",
                vm_status=vm_status,
                tx_hash=tx_hash,
            )

        logger.info("tx_committed", tx_hash=tx_hash, success=receipt.get("success"))
        return receipt
