"""
Result models.

Typed outcomes of a submission and of each workflow step.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional


class SubmissionStage(str, Enum):
    """Stages of the sign-and-submit protocol."""
    BUILT = "built"               # Payload constructed locally
    GENERATED = "generated"       # Raw transaction obtained from the node
    SIGNED = "signed"             # Signed by the sender
    SUBMITTED = "submitted"       # Accepted into the mempool, hash known


class TransactionStatus(str, Enum):
    """Final outcome of a submission."""
    CONFIRMED = "confirmed"
    FAILED = "failed"


@dataclass
class TransactionRecord:
    """
    Outcome of one sign-and-submit attempt.

    Attributes:
        status: Whether the transaction was confirmed
        tx_hash: Hash returned by the node at submission, if it got that far
        failed_stage: Last stage reached before the failure
        error: Error message for failed attempts
        vm_status: VM status reported for a committed transaction
    """

    status: TransactionStatus
    tx_hash: Optional[str] = None
    failed_stage: Optional[SubmissionStage] = None
    error: Optional[str] = None
    vm_status: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def succeeded(self) -> bool:
        return self.status == TransactionStatus.CONFIRMED

    @classmethod
    def confirmed(cls, tx_hash: str, vm_status: Optional[str] = None) -> "TransactionRecord":
        return cls(status=TransactionStatus.CONFIRMED, tx_hash=tx_hash, vm_status=vm_status)

    @classmethod
    def failed(
        cls,
        stage: SubmissionStage,
        error: str,
        tx_hash: Optional[str] = None,
        vm_status: Optional[str] = None,
    ) -> "TransactionRecord":
        return cls(
            status=TransactionStatus.FAILED,
            tx_hash=tx_hash,
            failed_stage=stage,
            error=error,
            vm_status=vm_status,
        )


class StepStatus(str, Enum):
    """Outcome of a workflow step."""
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    SKIPPED = "skipped"           # Not run because of the failure policy


@dataclass
class StepResult:
    """Outcome of one workflow step."""
    step: str
    status: StepStatus
    tx_hash: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == StepStatus.SUCCEEDED

    @classmethod
    def from_record(cls, step: str, record: TransactionRecord) -> "StepResult":
        if record.succeeded:
            return cls(step=step, status=StepStatus.SUCCEEDED, tx_hash=record.tx_hash)
        return cls(
            step=step,
            status=StepStatus.FAILED,
            tx_hash=record.tx_hash,
            error=record.error,
        )

    def to_dict(self) -> dict:
        return {
            "step": self.step,
            "status": self.status.value,
            "tx_hash": self.tx_hash,
            "error": self.error,
        }


@dataclass
class WorkflowReport:
    """Everything a workflow run observed, in execution order."""
    buyer_balance: Optional[int] = None
    steps: List[StepResult] = field(default_factory=list)
    started_at: datetime = field(default_factory=datetime.utcnow)
    finished_at: Optional[datetime] = None

    @property
    def succeeded(self) -> bool:
        return bool(self.steps) and all(s.succeeded for s in self.steps)

    @property
    def failed_steps(self) -> List[str]:
        return [s.step for s in self.steps if s.status == StepStatus.FAILED]

    def get_step(self, step: str) -> Optional[StepResult]:
        for result in self.steps:
            if result.step == step:
                return result
        return None

    def to_dict(self) -> dict:
        """Convert to dictionary for serialization."""
        return {
            "buyer_balance": self.buyer_balance,
            "succeeded": self.succeeded,
            "started_at": self.started_at.isoformat(),
            "finished_at": self.finished_at.isoformat() if self.finished_at else None,
            "steps": [s.to_dict() for s in self.steps],
        }
