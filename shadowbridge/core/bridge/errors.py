"""
Exceptions raised by the bridge orchestrator.

Three families matter to callers:
- UserInputError: a field-scoped problem the user fixes inline.
- PreconditionError: the caller sequenced things wrong (e.g. submitted
  before asset metadata loaded). Raised through ``boom``.
- RequestFailure: an approval or transfer request failed. Form state is
  preserved so the user can retry.
"""

from typing import TYPE_CHECKING, NoReturn, Optional

if TYPE_CHECKING:  # pragma: no cover
    from .models import ValidateResult


class BridgeError(Exception):
    """Base exception for bridge orchestration errors."""
    pass


class UserInputError(BridgeError):
    """Invalid amount or recipient."""
    pass


class InvalidAmount(UserInputError, ValueError):
    """A human amount string could not be converted to base units."""
    pass


class FormValidationError(UserInputError):
    """Submission attempted while the form has field errors."""

    def __init__(self, result: "ValidateResult"):
        fields = ", ".join(sorted(result.errors)) or "form"
        super().__init__(f"Invalid bridge form: {fields}")
        self.result = result


class PreconditionError(BridgeError):
    """Required metadata missing at submit time."""
    pass


class WalletNotConnectedError(PreconditionError):
    """Submission attempted without a signer while a wallet is required."""
    pass


class SubmissionInProgressError(BridgeError):
    """A second submission was attempted while one is outstanding."""
    pass


class RequestFailure(BridgeError):
    """An approval, transfer or allowance request failed."""

    def __init__(self, message: str, kind: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.kind = kind
        self.cause = cause


class AssetQueryError(BridgeError):
    """The bridge RPC returned an error or an unreadable payload."""
    pass


def boom(message: str) -> NoReturn:
    """Abort on a sequencing defect."""
    raise PreconditionError(message)
