"""
Workflow orchestrator.

Runs the marketplace demo: create a collection, mint a token into it, list
the token and buy it with the second wallet.
"""

from datetime import datetime
from typing import Awaitable, Callable, List, Optional

import structlog

from marketplace.config import FailurePolicy, MarketplaceConfig, get_config
from marketplace.core.assets import CollectionDescriptor, TokenDescriptor
from marketplace.core.identity import WalletPair
from marketplace.core.record import StepResult, StepStatus, WorkflowReport
from marketplace.node.interface import NodeInterface
from marketplace.tx.builder import MarketplacePayloadBuilder
from marketplace.tx.submitter import TransactionSubmitter

logger = structlog.get_logger(__name__)

CREATE_COLLECTION = "create_collection"
CREATE_TOKEN = "create_token"
LIST_NFT = "list_nft"
BUY_TOKEN = "buy_token"

STEPS = (CREATE_COLLECTION, CREATE_TOKEN, LIST_NFT, BUY_TOKEN)


class WorkflowOrchestrator:
    """
    Runs the four marketplace steps in order.

    Each step is isolated: its failure is logged and recorded in the report.
    With the best-effort policy every later step still runs, even though on
    chain it depends on the earlier ones; the node rejects what cannot
    succeed. With fail-fast the remaining steps are recorded as skipped.

    Usage:
        ```python
        orchestrator = WorkflowOrchestrator(node, wallets, collection, token)
        report = await orchestrator.run()
        ```
    """

    def __init__(
        self,
        node: NodeInterface,
        wallets: WalletPair,
        collection: CollectionDescriptor,
        token: TokenDescriptor,
        config: Optional[MarketplaceConfig] = None,
        builder: Optional[MarketplacePayloadBuilder] = None,
        submitter: Optional[TransactionSubmitter] = None,
        policy: Optional[FailurePolicy] = None,
    ):
        """
        Initialize the orchestrator.

        Args:
            node: Node interface used by every step
            wallets: Seller and buyer identities
            collection: Collection to create
            token: Token to mint, list and buy
            config: Marketplace configuration
            builder: Payload builder for the marketplace functions
            submitter: Sign-and-submit implementation
            policy: Failure policy (configured policy if omitted)
        """
        self.config = config or get_config()
        self.node = node
        self.wallets = wallets
        self.collection = collection
        self.token = token
        self.builder = builder or MarketplacePayloadBuilder(self.config)
        self.submitter = submitter or TransactionSubmitter(node)
        self.policy = policy or self.config.failure_policy

    async def run(self) -> WorkflowReport:
        """
        Run the balance query and all four steps once.

        Returns:
            Report with one result per step, in execution order
        """
        report = WorkflowReport()

        logger.info(
            "workflow_starting",
            seller=self.wallets.seller.short_address,
            buyer=self.wallets.buyer.short_address,
            collection=self.collection.name,
            token=self.token.name,
            policy=self.policy.value,
        )

        report.buyer_balance = await self.check_balance()

        steps: List[tuple] = [
            (CREATE_COLLECTION, self.create_collection),
            (CREATE_TOKEN, self.create_token),
            (LIST_NFT, self.list_nft),
            (BUY_TOKEN, self.buy_token),
        ]

        halted = False
        for name, step in steps:
            if halted:
                logger.info("step_skipped", step=name)
                report.steps.append(StepResult(step=name, status=StepStatus.SKIPPED))
                continue

            result = await self._run_step(name, step)
            report.steps.append(result)

            if not result.succeeded and self.policy == FailurePolicy.FAIL_FAST:
                halted = True

        report.finished_at = datetime.utcnow()
        logger.info(
            "workflow_finished",
            succeeded=report.succeeded,
            failed_steps=report.failed_steps,
        )
        return report

    async def check_balance(self) -> Optional[int]:
        """Log the buyer's balance. Returns None if the query fails."""
        buyer = self.wallets.buyer
        try:
            balance = await self.node.get_balance(buyer)
        except Exception as e:
            logger.error("balance_query_failed", address=buyer.short_address, error=str(e))
            return None

        logger.info("wallet_balance", address=buyer.address, balance=balance, coin="APT")
        return balance

    async def _run_step(
        self,
        name: str,
        step: Callable[[], Awaitable[StepResult]],
    ) -> StepResult:
        logger.info("step_starting", step=name)
        try:
            result = await step()
        except Exception as e:
            tx_hash = getattr(e, "tx_hash", None)
            logger.error("step_failed", step=name, tx_hash=tx_hash, error=str(e))
            return StepResult(step=name, status=StepStatus.FAILED, tx_hash=tx_hash, error=str(e))

        if result.succeeded:
            logger.info("step_succeeded", step=name, tx_hash=result.tx_hash)
        else:
            logger.error("step_failed", step=name, tx_hash=result.tx_hash, error=result.error)
        return result

    async def create_collection(self) -> StepResult:
        """Step 1: create the collection through the token helper and wait for it."""
        tx_hash = await self.node.create_collection(self.wallets.seller, self.collection)
        await self.node.wait_for_transaction(tx_hash, check_success=True)
        return StepResult(step=CREATE_COLLECTION, status=StepStatus.SUCCEEDED, tx_hash=tx_hash)

    async def create_token(self) -> StepResult:
        """Step 2: mint the token into the collection and wait for it."""
        tx_hash = await self.node.create_token(
            self.wallets.seller,
            self.collection.name,
            self.token,
        )
        await self.node.wait_for_transaction(tx_hash, check_success=True)
        return StepResult(step=CREATE_TOKEN, status=StepStatus.SUCCEEDED, tx_hash=tx_hash)

    async def list_nft(self) -> StepResult:
        """Step 3: list the token for sale, sent by the seller."""
        payload = self.builder.list_nft(self.wallets.seller, self.collection, self.token)
        record = await self.submitter.sign_and_submit(self.wallets.seller, payload)
        return StepResult.from_record(LIST_NFT, record)

    async def buy_token(self) -> StepResult:
        """Step 4: buy the listed token, sent by the buyer."""
        payload = self.builder.buy_token(
            self.wallets.seller,
            self.wallets.buyer,
            self.collection,
            self.token,
        )
        record = await self.submitter.sign_and_submit(self.wallets.buyer, payload)
        return StepResult.from_record(BUY_TOKEN, record)
