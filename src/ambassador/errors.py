"""Domain errors raised by the scoring, boost and opportunity services.

Business-rule violations still use ValueError and PermissionError. The
classes here cover the cases a caller has to tell apart: something already
happened, a row is missing, or the store failed in a way a retry might fix.
"""

from __future__ import annotations


class AmbassadorError(Exception):
    """Base class for domain errors."""


class ConflictError(AmbassadorError):
    """A uniqueness rule was hit: the action was already applied."""


class DuplicateCompletionError(ConflictError):
    """The applicant already completed this challenge."""

    def __init__(self, applicant_id: str, challenge_id: str) -> None:
        super().__init__("Already completed")
        self.applicant_id = applicant_id
        self.challenge_id = challenge_id


class DuplicateApplicationError(ConflictError):
    """The applicant already applied to this opportunity."""

    def __init__(self, applicant_id: str, opportunity_id: str) -> None:
        super().__init__("Already applied")
        self.applicant_id = applicant_id
        self.opportunity_id = opportunity_id


class DuplicateRecordError(ConflictError):
    """A catalogue row clashes with an existing one on a unique column."""

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity} already exists")
        self.entity = entity


class RecordNotFoundError(AmbassadorError, LookupError):
    """A referenced row does not exist."""

    def __init__(self, entity: str, record_id: str) -> None:
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.record_id = record_id


class TransientIOError(AmbassadorError):
    """The data store failed; the operation had no effect and may be retried."""

    def __init__(self, operation: str, original_error: Exception | None = None) -> None:
        super().__init__(f"Storage failure during {operation}")
        self.operation = operation
        self.original_error = original_error
