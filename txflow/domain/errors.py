"""Domain-level error types for use-case and adapter mapping.

Every failure the orchestration core reports is a ``UseCaseError`` with a
stable ``code`` (the failure *kind*) and a user-presentable ``message``.
Validation errors are raised locally before any network call; ledger and
signer errors carry enough detail for the caller to retry or abort.
"""

from __future__ import annotations

from typing import Optional


class UseCaseError(Exception):
    """Base class for use case level errors (user-presentable)."""

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code
        self.message = message

    @property
    def kind(self) -> str:
        return self.code


class _KindedError(UseCaseError):
    """Error whose code is fixed by its class."""

    code = "USE_CASE_ERROR"

    def __init__(self, message: str):
        super().__init__(type(self).code, message)


class ValidationError(_KindedError):
    """Local input error, always recoverable by correcting the input."""

    code = "VALIDATION_ERROR"


class InvalidAddress(ValidationError):
    code = "InvalidAddress"


class InvalidAmount(ValidationError):
    code = "InvalidAmount"


class InvalidAssetId(ValidationError):
    code = "InvalidAssetId"


class InvalidAssetParams(ValidationError):
    code = "InvalidAssetParams"


class EmptyGroup(ValidationError):
    code = "EmptyGroup"


class GroupTooLarge(ValidationError):
    code = "GroupTooLarge"


class GroupSealed(ValidationError):
    """Raised when a sealed group is asked to change."""

    code = "GroupSealed"


class MissingOptIn(ValidationError):
    """Receiver does not hold the asset a transfer depends on."""

    code = "MissingOptIn"


class LedgerUnavailable(_KindedError):
    """Transient read failure against the ledger client."""

    code = "LedgerUnavailable"


class SignerUnavailable(_KindedError):
    code = "SignerUnavailable"


class SignerDenied(_KindedError):
    code = "SignerDenied"


class PinningFailed(_KindedError):
    code = "PinningFailed"


class SubmissionRejected(_KindedError):
    """The ledger refused the submission; ``reason`` is its raw text."""

    code = "SubmissionRejected"

    def __init__(self, reason: str, message: Optional[str] = None):
        super().__init__(message or reason)
        self.reason = reason


__all__ = [
    "EmptyGroup",
    "GroupSealed",
    "GroupTooLarge",
    "InvalidAddress",
    "InvalidAmount",
    "InvalidAssetId",
    "InvalidAssetParams",
    "LedgerUnavailable",
    "MissingOptIn",
    "PinningFailed",
    "SignerDenied",
    "SignerUnavailable",
    "SubmissionRejected",
    "UseCaseError",
    "ValidationError",
]
