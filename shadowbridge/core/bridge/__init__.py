"""Bridge transfer orchestration components."""

from typing import TYPE_CHECKING

from .amount import normalize, to_base_units, to_human_string
from .errors import (
    BridgeError,
    FormValidationError,
    InvalidAmount,
    PreconditionError,
    RequestFailure,
    SubmissionInProgressError,
    UserInputError,
    WalletNotConnectedError,
    boom,
)
from .models import (
    Asset,
    AssetInfo,
    AssetQueryResult,
    Direction,
    NeedApprove,
    NetworkPair,
    OrchestratorState,
    Sufficient,
    TransferFormState,
    TransferSide,
    ValidateResult,
)

if TYPE_CHECKING:  # pragma: no cover
    from .form import BridgeFormContainer
    from .orchestrator import BridgeOrchestrator
    from .prefill import QueryParamPrefill

__all__ = [
    "normalize",
    "to_base_units",
    "to_human_string",
    "BridgeError",
    "FormValidationError",
    "InvalidAmount",
    "PreconditionError",
    "RequestFailure",
    "SubmissionInProgressError",
    "UserInputError",
    "WalletNotConnectedError",
    "boom",
    "Asset",
    "AssetInfo",
    "AssetQueryResult",
    "Direction",
    "NeedApprove",
    "NetworkPair",
    "OrchestratorState",
    "Sufficient",
    "TransferFormState",
    "TransferSide",
    "ValidateResult",
    "BridgeFormContainer",
    "BridgeOrchestrator",
    "QueryParamPrefill",
]


def __getattr__(name: str):  # pragma: no cover - simple thunk
    if name == "BridgeOrchestrator":
        from .orchestrator import BridgeOrchestrator as _BridgeOrchestrator

        return _BridgeOrchestrator
    if name == "BridgeFormContainer":
        from .form import BridgeFormContainer as _BridgeFormContainer

        return _BridgeFormContainer
    if name == "QueryParamPrefill":
        from .prefill import QueryParamPrefill as _QueryParamPrefill

        return _QueryParamPrefill
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
