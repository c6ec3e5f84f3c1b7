"""BridgeOrchestrator sequences allowance approval and bridge transfer for one form."""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from ...config import Settings, settings as default_settings
from ...logging_config import transfer_log_context
from ...providers.base import (
    AllowanceSource,
    AssetQueryService,
    BridgeBroadcaster,
    SignerProvider,
)
from .allowance import (
    evaluate_allowance,
    parse_approval_directions,
    requested_amount,
    spendable_asset,
)
from .amount import to_base_units, to_human_string
from .errors import (
    FormValidationError,
    RequestFailure,
    SubmissionInProgressError,
    WalletNotConnectedError,
    boom,
)
from .form import BridgeFormContainer
from .models import (
    FORM_FIELDS,
    AllowanceStatus,
    Asset,
    AssetListState,
    AssetQueryResult,
    Direction,
    FieldStatus,
    NeedApprove,
    NetworkPair,
    OrchestratorState,
    SubmitOutcome,
    Sufficient,
    TransferFormState,
    TransferPreview,
    TransferSide,
    ValidateResult,
)
from .networks import (
    SUPPORTED_NETWORKS,
    NetworkSpec,
    asset_list_for,
    network_direction,
    network_specs,
    recipient_label,
    requires_network_switch,
)
from .prefill import QueryParamPrefill
from .validation import field_status, validate_form


class BridgeOrchestrator:
    """State machine behind a bridge operation form.

    Owns the submission lifecycle (``IDLE -> VALIDATING -> APPROVAL_PENDING |
    SUBMISSION_PENDING -> IDLE``), the in-flight flag, touched/validation
    state and the loaded asset lists. Form values live in the injected
    ``BridgeFormContainer``; the orchestrator is their only structural writer
    (resets, direction, selection) while views write amount and recipient.

    Collaborators are injected so the orchestrator never signs or talks to an
    RPC itself; it only decides what to request and when.
    """

    def __init__(
        self,
        *,
        form: BridgeFormContainer,
        broadcaster: BridgeBroadcaster,
        allowance_source: Optional[AllowanceSource] = None,
        asset_query: Optional[AssetQueryService] = None,
        prefill: Optional[QueryParamPrefill] = None,
        config: Optional[Settings] = None,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._logger = logger or logging.getLogger(__name__)
        self._config = config or default_settings
        self._form = form
        self._broadcaster = broadcaster
        self._allowance_source = allowance_source
        self._asset_query = asset_query
        self._prefill = prefill

        self._approval_directions = parse_approval_directions(
            self._config.approval_direction_names()
        )
        self._networks: Dict[str, NetworkSpec] = network_specs(self._config)

        self._state = OrchestratorState.IDLE
        self._signer: Optional[SignerProvider] = None
        self._in_flight = False
        self._epoch = 0
        self._touched: Dict[str, bool] = {name: False for name in FORM_FIELDS}
        self._validation = ValidateResult()
        self._allowance: Optional[AllowanceStatus] = None
        self._assets: Optional[AssetQueryResult] = None
        self._asset_list_state = AssetListState.NOT_LOADED

        self._unsubscribe = form.subscribe(self._on_form_change)

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def state(self) -> OrchestratorState:
        return self._state

    @property
    def form(self) -> BridgeFormContainer:
        return self._form

    @property
    def signer(self) -> Optional[SignerProvider]:
        return self._signer

    @property
    def in_flight(self) -> bool:
        """True while an approval or transfer request is outstanding."""
        return self._in_flight

    @property
    def validation(self) -> ValidateResult:
        return self._validation

    @property
    def touched(self) -> Dict[str, bool]:
        return dict(self._touched)

    @property
    def allowance_status(self) -> Optional[AllowanceStatus]:
        """Last evaluated allowance; None until evaluated for the current selection."""
        return self._allowance

    @property
    def asset_list_state(self) -> AssetListState:
        return self._asset_list_state

    @property
    def network_pair(self) -> NetworkPair:
        return NetworkPair(network=self._form.network, direction=self._form.direction)

    @property
    def network_spec(self) -> NetworkSpec:
        return self._networks[self._form.network]

    @property
    def asset_list(self) -> List[Asset]:
        if self._asset_list_state is not AssetListState.LOADED:
            return []
        return asset_list_for(self.network_pair, self._assets)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def mount(self) -> ValidateResult:
        """Apply URL prefill once and run the initial validation."""
        if self._prefill is not None:
            for name, was_prefilled in self._prefill.apply_once().items():
                if was_prefilled:
                    self._touched[name] = True
        return self.validate()

    def dispose(self) -> None:
        self._unsubscribe()

    def _on_form_change(self, _state: TransferFormState) -> None:
        self.validate()

    def validate(self) -> ValidateResult:
        self._validation = validate_form(
            self._form.state,
            native_chain=self._config.native_chain,
            counterpart_chain=self._config.counterpart_chain,
        )
        return self._validation

    def touch(self, name: str) -> FieldStatus:
        if name not in self._touched:
            raise KeyError(f"Unknown form field: {name}")
        self._touched[name] = True
        self.validate()
        return self.status_of(name)

    def status_of(self, name: str) -> FieldStatus:
        return field_status(name, self._validation, self._touched)

    # ------------------------------------------------------------------
    # Selection, direction and signer
    # ------------------------------------------------------------------

    def default_recipient(self) -> str:
        """Signer identity on the destination chain, or "" without a signer."""
        if self._signer is None:
            return ""
        if self._form.direction.side.recipient_chain is TransferSide.NATIVE:
            return self._signer.identity_native()
        return self._signer.identity_counterpart()

    def reset(self) -> None:
        """Back to IDLE with a blank amount and the default recipient.

        Safe to call at any time; a submission still outstanding keeps the
        in-flight flag, and its completion will not reset again.
        """
        self._epoch += 1
        self._state = OrchestratorState.IDLE
        self._allowance = None
        self._form.reset_fields(recipient=self.default_recipient())
        self._logger.debug(
            "Bridge form reset (direction=%s, signer=%s)",
            self._form.direction.value,
            self._signer is not None,
        )

    def set_signer(self, signer: Optional[SignerProvider]) -> None:
        if signer is self._signer:
            return
        self._signer = signer
        self.reset()
        if self._prefill is not None:
            self._prefill.on_signer(signer)

    def switch_direction(self, direction: Direction) -> None:
        direction = Direction(direction)
        if direction is self._form.direction:
            return
        self._form.set_direction(direction)
        # the asset list is direction dependent
        self._form.set_selected_asset(None)
        self.reset()

    def switch_network(self, network: str) -> None:
        if network not in SUPPORTED_NETWORKS:
            raise ValueError(f"Unsupported network: {network}")
        if network == self._form.network:
            return
        self._form.set_network(network)
        self._form.set_selected_asset(None)
        self._allowance = None

    def select_pair(self, pair: NetworkPair) -> None:
        self.switch_network(pair.network)
        self.switch_direction(pair.direction)

    def select_asset(self, asset: Optional[Asset]) -> None:
        self._allowance = None
        self._form.set_selected_asset(asset)

    def max_amount(self) -> str:
        """Fill the amount with the selected asset's full balance."""
        asset = self._form.selected_asset
        if asset is None:
            boom("no asset selected")
        value = to_human_string(asset.amount, asset.require_decimals(), separator=False)
        self._form.set_bridge_from_amount(value)
        return value

    # ------------------------------------------------------------------
    # Asset list
    # ------------------------------------------------------------------

    async def load_assets(self) -> AssetQueryResult:
        if self._asset_query is None:
            boom("no asset query service configured")
        self._asset_list_state = AssetListState.LOADING
        try:
            result = await self._asset_query.query_assets()
        except Exception:
            self._asset_list_state = AssetListState.FAILED
            self._logger.warning("Bridge asset query failed", exc_info=True)
            raise
        self._assets = result
        self._asset_list_state = AssetListState.LOADED
        return result

    # ------------------------------------------------------------------
    # Allowance
    # ------------------------------------------------------------------

    async def refresh_allowance(self) -> AllowanceStatus:
        """Re-derive the allowance status for the current selection."""
        epoch = self._epoch
        direction = self._form.direction
        selected = self._form.selected_asset
        status = await self._evaluate_allowance(selected, direction)
        if epoch == self._epoch and selected is self._form.selected_asset:
            self._allowance = status
        return status

    async def _evaluate_allowance(self, selected: Optional[Asset], direction: Direction) -> AllowanceStatus:
        if selected is None or direction not in self._approval_directions:
            return Sufficient()
        token = spendable_asset(selected, direction)
        if token is None or (token.info is not None and not token.info.requires_approval):
            return Sufficient()
        if self._signer is None:
            raise WalletNotConnectedError(f"Connect a wallet to check the {token.symbol} allowance")
        if self._allowance_source is None:
            boom(f"no allowance source configured for {token.identity()}")

        if token.network == self._config.counterpart_network:
            owner = self._signer.identity_counterpart()
        else:
            owner = self._signer.identity_native()
        spender = self.network_spec.bridge_contract

        try:
            approved = await self._allowance_source.get_allowance(owner, spender, token)
        except Exception as exc:
            self._logger.warning("Allowance lookup failed for %s: %s", token.identity(), exc)
            raise RequestFailure(f"Failed to read allowance: {exc}", kind="allowance", cause=exc) from exc

        requested = requested_amount(token, self._form.bridge_from_amount)
        return evaluate_allowance(
            selected,
            direction,
            approved,
            requested,
            approval_directions=self._approval_directions,
        )

    def can_submit(self) -> bool:
        """Whether the submit action should be enabled."""
        if self._in_flight:
            return False
        if self._signer is None:
            # the button prompts a wallet connection instead
            return True
        return self._validation.ok or isinstance(self._allowance, NeedApprove)

    # ------------------------------------------------------------------
    # Submission
    # ------------------------------------------------------------------

    async def submit(self) -> SubmitOutcome:
        """Issue the approval or the transfer the form currently calls for.

        Raises:
            SubmissionInProgressError: another submission is outstanding
            WalletNotConnectedError: no signer while a wallet is required, or
                while the outgoing token needs an allowance check
            PreconditionError: asset, shadow or decimals not loaded
            FormValidationError: transfer requested with field errors
            RequestFailure: the broadcaster rejected the request
        """
        if self._in_flight:
            self._logger.warning("Rejected bridge submission: another one is in flight")
            raise SubmissionInProgressError("A bridge submission is already in progress")

        self._in_flight = True
        epoch = self._epoch
        try:
            self._state = OrchestratorState.VALIDATING
            selected = self._form.selected_asset
            direction = self._form.direction
            with transfer_log_context(
                network=self._form.network,
                direction=direction.value,
                asset=selected.identity() if selected is not None else None,
            ):
                return await self._submit(selected, direction, epoch)
        finally:
            # failures leave the form untouched; success already reset it
            if epoch == self._epoch:
                self._state = OrchestratorState.IDLE
            self._in_flight = False

    async def _submit(self, selected: Optional[Asset], direction: Direction, epoch: int) -> SubmitOutcome:
        if self._config.require_connected_wallet and self._signer is None:
            raise WalletNotConnectedError("Connect a wallet before bridging")
        if selected is None:
            boom("no asset selected")
        if selected.shadow is None:
            boom(f"shadow asset is not loaded for {selected.identity()}")
        outgoing = selected if direction.side is TransferSide.NATIVE else selected.shadow
        outgoing.require_decimals()

        result = self.validate()
        allowance = await self.refresh_allowance()
        if isinstance(allowance, NeedApprove):
            return await self._approve(selected, direction, allowance, epoch)

        if not result.ok:
            self._logger.info("Bridge submission blocked by form errors: %s", sorted(result.errors))
            raise FormValidationError(result)
        return await self._transfer(outgoing, epoch)

    async def _approve(
        self,
        selected: Asset,
        direction: Direction,
        allowance: NeedApprove,
        epoch: int,
    ) -> SubmitOutcome:
        token = spendable_asset(selected, direction).copy()
        self._state = OrchestratorState.APPROVAL_PENDING
        self._logger.info("Requesting approval of %s base units for %s", allowance.add_approve, token.identity())
        try:
            receipt = await self._broadcaster.send_approve(token, allowance.add_approve)
        except Exception as exc:
            self._logger.warning("Approval request failed: %s", exc)
            raise RequestFailure(f"Approval failed: {exc}", kind="approve", cause=exc) from exc

        self._logger.info("Approval confirmed for %s", token.identity())
        self._after_submit(epoch)
        return SubmitOutcome(kind="approve", asset=token, amount=allowance.add_approve, receipt=receipt)

    async def _transfer(self, outgoing: Asset, epoch: int) -> SubmitOutcome:
        asset = outgoing.copy()
        asset.amount = to_base_units(self._form.bridge_from_amount, asset.require_decimals())
        recipient = self._form.recipient.strip()

        self._state = OrchestratorState.SUBMISSION_PENDING
        self._logger.info("Requesting bridge transfer of %s base units of %s", asset.amount, asset.identity())
        try:
            receipt = await self._broadcaster.send_transfer(asset, recipient)
        except Exception as exc:
            self._logger.warning("Bridge transfer request failed: %s", exc)
            raise RequestFailure(f"Bridge transfer failed: {exc}", kind="transfer", cause=exc) from exc

        self._logger.info("Bridge transfer submitted for %s", asset.identity())
        self._after_submit(epoch)
        return SubmitOutcome(kind="transfer", asset=asset, amount=asset.amount, recipient=recipient, receipt=receipt)

    def _after_submit(self, epoch: int) -> None:
        if epoch != self._epoch:
            # a direction/signer reset already ran while the request was pending
            self._logger.debug("Skipping post-submit reset; form was reset meanwhile")
            return
        self.reset()

    # ------------------------------------------------------------------
    # Presentation helpers
    # ------------------------------------------------------------------

    def recipient_label(self) -> str:
        return recipient_label(self.network_pair, self.network_spec, self._config.counterpart_symbol)

    def requires_network_switch(self, wallet_chain_id: Optional[int]) -> bool:
        return requires_network_switch(wallet_chain_id, self.network_spec)

    def preview(self) -> Optional[TransferPreview]:
        """Summary of the pending transfer; None until asset, amount and recipient are set."""
        asset = self._form.selected_asset
        amount = self._form.bridge_from_amount
        recipient = self._form.recipient
        if not (asset and amount and recipient):
            return None
        from_network, to_network = network_direction(self.network_pair, self._config.counterpart_network)
        return TransferPreview(
            from_network=from_network,
            to_network=to_network,
            symbol=asset.symbol,
            amount=amount,
            recipient=recipient,
        )
