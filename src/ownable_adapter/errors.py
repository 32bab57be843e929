"""Provisioning error hierarchy.

Every error carries a stable ``code`` so callers can branch on the failure
class without parsing messages. Nothing in this package retries; these
errors always propagate to the caller, who re-invokes from scratch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .provisioning.handshake import AdapterBinding

RESOLUTION_FAILED_CODE = 'resolution_failed'
SUBMISSION_FAILED_CODE = 'submission_failed'
TRANSACTION_REVERTED_CODE = 'transaction_reverted'
EVENT_EXTRACTION_FAILED_CODE = 'event_extraction_failed'
HANDSHAKE_FAILED_CODE = 'handshake_failed'


class ProvisioningError(RuntimeError):
    """Base class for all provisioning failures."""

    code = 'provisioning_failed'

    def payload(self) -> dict[str, str]:
        """Canonical error payload for logs and reports."""
        return {'code': self.code, 'detail': str(self)}


class ResolutionError(ProvisioningError):
    """A reference could not be normalized into a live instance."""

    code = RESOLUTION_FAILED_CODE


class ArtifactNotFoundError(ResolutionError):
    """Raised when the artifact registry has no artifact by that name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f'artifact not found: {name!r}')


class SubmissionError(ProvisioningError):
    """A deployment or transaction was rejected."""

    code = SUBMISSION_FAILED_CODE


class TransactionRevertedError(SubmissionError):
    """The ledger reverted a transaction."""

    code = TRANSACTION_REVERTED_CODE

    def __init__(self, function: str, reason: str) -> None:
        self.function = function
        self.reason = reason
        super().__init__(f'{function} reverted: {reason}')


class EventExtractionError(ProvisioningError):
    """The expected event is missing from a receipt or is malformed."""

    code = EVENT_EXTRACTION_FAILED_CODE


class HandshakeError(SubmissionError):
    """Ownership transfer to the adapter failed.

    ``binding`` is left in the ``constructed`` state and can be passed back
    to :meth:`OwnershipHandshake.complete` to retry the transfer.
    """

    code = HANDSHAKE_FAILED_CODE

    def __init__(self, message: str, *, binding: AdapterBinding) -> None:
        self.binding = binding
        super().__init__(message)
