"""
Transaction Submitter - the sign-and-submit protocol.

Takes a payload from intent to a committed transaction:

    Built -> Generated -> Signed -> Submitted -> Confirmed | Failed

Failures at any stage are logged and returned as a failed record; callers
never see an exception from here.
"""

import structlog

from marketplace.core.identity import WalletIdentity
from marketplace.core.payload import EntryFunctionCall
from marketplace.core.record import SubmissionStage, TransactionRecord
from marketplace.exceptions import TransactionRejected
from marketplace.node.interface import NodeInterface

logger = structlog.get_logger(__name__)


class TransactionSubmitter:
    """
    Runs generate, sign, submit and confirm for one payload at a time.

    No deduplication is done: every call is a new transaction with a new
    sequence number.
    """

    def __init__(self, node: NodeInterface, check_success: bool = True):
        """
        Initialize the submitter.

        Args:
            node: Node interface used for every stage
            check_success: Treat a committed but aborted transaction as failed
        """
        self.node = node
        self.check_success = check_success

    async def sign_and_submit(
        self,
        sender: WalletIdentity,
        payload: EntryFunctionCall,
    ) -> TransactionRecord:
        """
        Sign a payload as the sender and submit it.

        Args:
            sender: Wallet sending and paying for the transaction
            payload: Entry function call to execute

        Returns:
            Confirmed record carrying the submission hash, or a failed record
        """
        stage = SubmissionStage.BUILT
        tx_hash = None

        logger.info(
            "sign_and_submit_started",
            function=payload.function_name,
            sender=sender.short_address,
        )

        try:
            raw_transaction = await self.node.generate_transaction(sender.address, payload)
            stage = SubmissionStage.GENERATED

            signed_transaction = await self.node.sign_transaction(sender, raw_transaction)
            stage = SubmissionStage.SIGNED

            tx_hash = await self.node.submit_transaction(signed_transaction)
            stage = SubmissionStage.SUBMITTED
            logger.info("transaction_submitted", function=payload.function_name, tx_hash=tx_hash)

            receipt = await self.node.wait_for_transaction(
                tx_hash,
                check_success=self.check_success,
            )

        except TransactionRejected as e:
            logger.error(
                "sign_and_submit_failed",
                function=payload.function_name,
                stage=stage.value,
                tx_hash=tx_hash,
                vm_status=e.vm_status,
                error=str(e),
            )
            return TransactionRecord.failed(stage, str(e), tx_hash=tx_hash, vm_status=e.vm_status)

        except Exception as e:
            logger.error(
                "sign_and_submit_failed",
                function=payload.function_name,
                stage=stage.value,
                tx_hash=tx_hash,
                error=str(e),
            )
            return TransactionRecord.failed(stage, str(e), tx_hash=tx_hash)

        vm_status = receipt.get("vm_status") if isinstance(receipt, dict) else None
        logger.info(
            "transaction_confirmed",
            function=payload.function_name,
            tx_hash=tx_hash,
            vm_status=vm_status,
        )
        return TransactionRecord.confirmed(tx_hash, vm_status=vm_status)
