# interior_ledger/core/exceptions.py
"""
Domain errors raised by the ledger engine.

Every error carries a human readable message and a ``kind``. The HTTP layer
maps them to JSON responses in ``interior_ledger.main``; the engine itself
never retries and never swallows them.
"""
from typing import Any, Dict, List, Optional
import uuid


class LedgerError(Exception):
    kind = "ledger_error"
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> Dict[str, Any]:
        return {"detail": self.message, "kind": self.kind}


class ValidationError(LedgerError):
    kind = "validation_error"
    status_code = 400


class NotFoundError(LedgerError):
    kind = "not_found"
    status_code = 404


class NoEligibleProjectsError(LedgerError):
    kind = "no_eligible_projects"
    status_code = 409

    def __init__(self, message: str = "No projects are currently In Progress"):
        super().__init__(message)


class DuplicateError(LedgerError):
    kind = "duplicate"
    status_code = 409


class PartialTransferError(LedgerError):
    """One half of a cross-project transfer could not be written."""
    kind = "partial_transfer"
    status_code = 500

    def __init__(self, message: str, failed_step: str, compensated: bool):
        super().__init__(message)
        self.failed_step = failed_step
        self.compensated = compensated

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({"failed_step": self.failed_step, "compensated": self.compensated})
        return data


class PartialDistributionError(LedgerError):
    """A shared-expense distribution stopped before every project got its entry."""
    kind = "partial_distribution"
    status_code = 500

    def __init__(
        self,
        message: str,
        expected_count: int,
        written_project_ids: List[uuid.UUID],
        failed_project_id: Optional[uuid.UUID],
        rolled_back: bool,
    ):
        super().__init__(message)
        self.expected_count = expected_count
        self.written_project_ids = written_project_ids
        self.failed_project_id = failed_project_id
        self.rolled_back = rolled_back

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update({
            "expected_count": self.expected_count,
            "written_count": len(self.written_project_ids),
            "written_project_ids": [str(pid) for pid in self.written_project_ids],
            "failed_project_id": str(self.failed_project_id) if self.failed_project_id else None,
            "rolled_back": self.rolled_back,
        })
        return data
