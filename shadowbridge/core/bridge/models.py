"""Typed models used by the bridge orchestrator."""

from __future__ import annotations

import copy as _copy
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from .errors import boom

BRIDGE_AMOUNT_FIELD = "bridgeInInputAmount"
RECIPIENT_FIELD = "recipient"
FORM_FIELDS = (BRIDGE_AMOUNT_FIELD, RECIPIENT_FIELD)


class Direction(str, Enum):
    """Bridge direction."""
    IN = "In"      # native -> shadow (deposit)
    OUT = "Out"    # shadow -> native (withdrawal)

    @property
    def side(self) -> "TransferSide":
        return TransferSide.NATIVE if self is Direction.IN else TransferSide.COUNTERPART


class TransferSide(str, Enum):
    """Which half of the asset pair leaves the user's wallet."""
    NATIVE = "native"            # the selected asset itself
    COUNTERPART = "counterpart"  # the selected asset's shadow

    @property
    def recipient_chain(self) -> "TransferSide":
        """Chain the recipient lives on: always the opposite side."""
        return TransferSide.COUNTERPART if self is TransferSide.NATIVE else TransferSide.NATIVE


class OrchestratorState(str, Enum):
    """Transfer orchestrator lifecycle."""
    IDLE = "idle"
    VALIDATING = "validating"
    APPROVAL_PENDING = "approval_pending"
    SUBMISSION_PENDING = "submission_pending"


class AssetListState(str, Enum):
    NOT_LOADED = "not_loaded"
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class AssetInfo:
    """Chain metadata for an asset; ``decimals`` stays None until loaded."""
    decimals: Optional[int] = None
    name: str = ""
    logo_uri: Optional[str] = None
    requires_approval: bool = True


@dataclass
class Asset:
    """A bridgeable asset, optionally paired with its shadow on the other chain.

    ``amount`` is in base units of this asset's own ``info.decimals``.
    """
    network: str
    address: str
    symbol: str
    amount: int = 0
    info: Optional[AssetInfo] = None
    shadow: Optional["Asset"] = None

    def identity(self) -> str:
        return f"{self.network}/{self.address.lower()}"

    @property
    def decimals(self) -> Optional[int]:
        return self.info.decimals if self.info is not None else None

    def require_decimals(self) -> int:
        decimals = self.decimals
        if decimals is None:
            boom(f"asset info is not loaded for {self.identity()}")
        return decimals

    def copy(self, **overrides: Any) -> "Asset":
        """Independent copy; shares no mutable state with the original."""
        clone = _copy.deepcopy(self)
        return replace(clone, **overrides) if overrides else clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Asset):
            return NotImplemented
        return self.identity() == other.identity()

    def __hash__(self) -> int:
        return hash(self.identity())


@dataclass(frozen=True)
class NetworkPair:
    network: str
    direction: Direction


@dataclass(frozen=True)
class Sufficient:
    status: str = "Sufficient"


@dataclass(frozen=True)
class NeedApprove:
    add_approve: int
    status: str = "NeedApprove"


AllowanceStatus = Union[Sufficient, NeedApprove]


@dataclass
class ValidateResult:
    """Field name -> error message. Empty means the form is valid."""
    errors: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors

    def get(self, name: str) -> Optional[str]:
        return self.errors.get(name)


@dataclass(frozen=True)
class FieldStatus:
    validate_status: str = ""  # "error" or ""
    help: str = ""


@dataclass
class TransferFormState:
    """The single mutable state shared by every consumer of a bridge form."""
    direction: Direction = Direction.IN
    network: str = "Ethereum"
    bridge_from_amount: str = ""
    recipient: str = ""
    selected_asset: Optional[Asset] = None


@dataclass
class AssetQueryResult:
    native_chain_assets: List[Asset] = field(default_factory=list)
    counterpart_chain_assets: List[Asset] = field(default_factory=list)


@dataclass
class SubmitOutcome:
    """What the orchestrator requested and what the broadcaster returned."""
    kind: str  # "approve" or "transfer"
    asset: Asset
    amount: int
    recipient: Optional[str] = None
    receipt: Any = None


@dataclass
class TransferPreview:
    from_network: str
    to_network: str
    symbol: str
    amount: str
    recipient: str
