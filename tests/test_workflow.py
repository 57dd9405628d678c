"""
Test suite for the marketplace workflow.

Covers step ordering, failure isolation and the failure policies.
"""

import pytest

from marketplace.config import FailurePolicy
from marketplace.core.record import StepStatus
from marketplace.core.workflow import (
    BUY_TOKEN,
    CREATE_COLLECTION,
    CREATE_TOKEN,
    LIST_NFT,
    STEPS,
    WorkflowOrchestrator,
)
from marketplace.exceptions import NetworkError, TransactionRejected


def make_orchestrator(node, wallets, collection, token, config, **kwargs) -> WorkflowOrchestrator:
    return WorkflowOrchestrator(
        node=node,
        wallets=wallets,
        collection=collection,
        token=token,
        config=config,
        **kwargs,
    )


def business_operations(node) -> list:
    """Balance query, helper calls and payload submissions in call order."""
    ops = []
    for name, details in node.calls:
        if name in ("get_balance", "create_collection", "create_token"):
            ops.append(name)
        elif name == "generate_transaction":
            ops.append(details["payload"].function_name)
    return ops


class TestWorkflowOrder:
    """Tests for the end-to-end call sequence."""

    @pytest.mark.asyncio
    async def test_end_to_end_order(self, mock_node, wallets, collection, token, test_config):
        orchestrator = make_orchestrator(mock_node, wallets, collection, token, test_config)

        report = await orchestrator.run()

        assert business_operations(mock_node) == [
            "get_balance",
            "create_collection",
            "create_token",
            "list_nft",
            "buy_token",
        ]
        assert report.succeeded is True
        assert [s.step for s in report.steps] == list(STEPS)

    @pytest.mark.asyncio
    async def test_balance_is_queried_for_buyer(self, mock_node, wallets, collection, token, test_config):
        report = await make_orchestrator(mock_node, wallets, collection, token, test_config).run()

        assert mock_node.calls[0] == ("get_balance", {"address": wallets.buyer.address})
        assert report.buyer_balance == mock_node.balance

    @pytest.mark.asyncio
    async def test_helpers_use_seller_and_wait_for_success(
        self, mock_node, wallets, collection, token, test_config
    ):
        await make_orchestrator(mock_node, wallets, collection, token, test_config).run()

        create_collection = mock_node.calls[1]
        assert create_collection[0] == "create_collection"
        assert create_collection[1]["sender"] == wallets.seller.address
        assert create_collection[1]["collection"] == collection

        assert mock_node.calls[2][0] == "wait_for_transaction"
        assert mock_node.calls[2][1]["check_success"] is True

        create_token = mock_node.calls[3]
        assert create_token[0] == "create_token"
        assert create_token[1]["collection_name"] == collection.name
        assert create_token[1]["token"] == token

    @pytest.mark.asyncio
    async def test_listing_and_purchase_payloads(
        self, mock_node, wallets, collection, token, test_config
    ):
        await make_orchestrator(mock_node, wallets, collection, token, test_config).run()

        list_payload, buy_payload = mock_node.payloads()

        assert len(list_payload.arguments) == 6
        assert list_payload.argument_values[0] == wallets.seller.address
        assert len(buy_payload.arguments) == 5
        assert buy_payload.argument_values[0] == wallets.seller.address
        assert buy_payload.argument_values[1] == wallets.buyer.address

    @pytest.mark.asyncio
    async def test_senders(self, mock_node, wallets, collection, token, test_config):
        """The seller sends the listing and the buyer sends the purchase."""
        await make_orchestrator(mock_node, wallets, collection, token, test_config).run()

        senders = [d["sender"] for name, d in mock_node.calls if name == "generate_transaction"]
        signers = [d["sender"] for name, d in mock_node.calls if name == "sign_transaction"]

        assert senders == [wallets.seller.address, wallets.buyer.address]
        assert signers == senders


class TestFailureIsolation:
    """Tests for best-effort step isolation."""

    @pytest.mark.asyncio
    async def test_rejected_collection_does_not_stop_later_steps(
        self, mock_node, wallets, collection, token, test_config
    ):
        mock_node.fail("create_collection", TransactionRejected("collection rejected"))
        orchestrator = make_orchestrator(mock_node, wallets, collection, token, test_config)

        report = await orchestrator.run()

        assert business_operations(mock_node) == [
            "get_balance",
            "create_collection",
            "create_token",
            "list_nft",
            "buy_token",
        ]
        assert mock_node.operations.count("create_token") == 1
        assert report.get_step(CREATE_COLLECTION).status == StepStatus.FAILED
        assert "collection rejected" in report.get_step(CREATE_COLLECTION).error
        assert report.get_step(CREATE_TOKEN).status == StepStatus.SUCCEEDED
        assert report.get_step(BUY_TOKEN).status == StepStatus.SUCCEEDED
        assert report.succeeded is False
        assert report.failed_steps == [CREATE_COLLECTION]

    @pytest.mark.asyncio
    async def test_failed_submission_recorded_per_step(
        self, mock_node, wallets, collection, token, test_config
    ):
        mock_node.fail("submit_transaction", TransactionRejected("simulation failed"))

        report = await make_orchestrator(mock_node, wallets, collection, token, test_config).run()

        assert report.get_step(CREATE_COLLECTION).succeeded
        assert report.get_step(CREATE_TOKEN).succeeded
        assert report.get_step(LIST_NFT).status == StepStatus.FAILED
        assert report.get_step(BUY_TOKEN).status == StepStatus.FAILED
        assert mock_node.operations.count("submit_transaction") == 2

    @pytest.mark.asyncio
    async def test_aborted_helper_keeps_its_hash(
        self, mock_node, wallets, collection, token, test_config
    ):
        mock_node.fail(
            "wait_for_transaction",
            TransactionRejected("Move abort", vm_status="Move abort", tx_hash="0xabc"),
        )

        report = await make_orchestrator(mock_node, wallets, collection, token, test_config).run()

        step = report.get_step(CREATE_COLLECTION)
        assert step.status == StepStatus.FAILED
        assert step.tx_hash == "0xabc"
        assert report.to_dict()["steps"][0]["tx_hash"] == "0xabc"

    @pytest.mark.asyncio
    async def test_balance_failure_is_informational(
        self, mock_node, wallets, collection, token, test_config
    ):
        mock_node.fail("get_balance", NetworkError("node unreachable"))

        report = await make_orchestrator(mock_node, wallets, collection, token, test_config).run()

        assert report.buyer_balance is None
        assert report.succeeded is True

    @pytest.mark.asyncio
    async def test_running_twice_submits_twice(
        self, mock_node, wallets, collection, token, test_config
    ):
        orchestrator = make_orchestrator(mock_node, wallets, collection, token, test_config)

        await orchestrator.run()
        await orchestrator.run()

        assert mock_node.operations.count("create_collection") == 2
        assert mock_node.operations.count("create_token") == 2
        assert len(mock_node.submitted_txs) == 4
        assert len(set(mock_node.submitted_txs)) == 4


class TestFailFastPolicy:
    """Tests for the fail-fast policy."""

    @pytest.mark.asyncio
    async def test_steps_after_failure_are_skipped(
        self, mock_node, wallets, collection, token, test_config
    ):
        mock_node.fail("create_token", TransactionRejected("collection missing"))
        orchestrator = make_orchestrator(
            mock_node, wallets, collection, token, test_config,
            policy=FailurePolicy.FAIL_FAST,
        )

        report = await orchestrator.run()

        assert [s.status for s in report.steps] == [
            StepStatus.SUCCEEDED,
            StepStatus.FAILED,
            StepStatus.SKIPPED,
            StepStatus.SKIPPED,
        ]
        assert "generate_transaction" not in mock_node.operations

    @pytest.mark.asyncio
    async def test_policy_from_config(self, mock_node, wallets, collection, token, test_config):
        config = test_config.model_copy(update={"failure_policy": FailurePolicy.FAIL_FAST})

        orchestrator = make_orchestrator(mock_node, wallets, collection, token, config)

        assert orchestrator.policy == FailurePolicy.FAIL_FAST

    @pytest.mark.asyncio
    async def test_report_serializes(self, mock_node, wallets, collection, token, test_config):
        report = await make_orchestrator(mock_node, wallets, collection, token, test_config).run()

        data = report.to_dict()

        assert data["succeeded"] is True
        assert [s["step"] for s in data["steps"]] == list(STEPS)
        assert data["finished_at"] is not None
