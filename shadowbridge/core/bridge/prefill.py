"""One-shot prefill of the bridge form from URL query parameters."""

import logging
from typing import Dict, Optional

from ...providers.base import QueryStore, SignerProvider
from .form import BridgeFormContainer
from .models import BRIDGE_AMOUNT_FIELD, RECIPIENT_FIELD

logger = logging.getLogger(__name__)

RECIPIENT_PARAM = "recipient"
AMOUNT_PARAM = "amount"


class QueryParamPrefill:
    """Applies ``recipient``/``amount`` from the URL once, strips them once a signer shows up.

    A connected wallet derives its own default recipient, which must win over
    values carried in a shared link.
    """

    def __init__(self, store: QueryStore, form: BridgeFormContainer):
        self._store = store
        self._form = form
        self._init_recipient = store.get(RECIPIENT_PARAM)
        self._init_amount = store.get(AMOUNT_PARAM)
        self._applied = False
        self._stripped = False

    @property
    def has_params(self) -> bool:
        return bool(self._init_recipient) or bool(self._init_amount)

    def initial_touched(self) -> Dict[str, bool]:
        """Prefilled fields count as touched so their errors surface immediately."""
        return {
            BRIDGE_AMOUNT_FIELD: bool(self._init_amount),
            RECIPIENT_FIELD: bool(self._init_recipient),
        }

    def apply_once(self) -> Dict[str, bool]:
        if self._applied:
            return self.initial_touched()
        self._applied = True
        if not self.has_params:
            return self.initial_touched()

        if self._init_recipient:
            self._form.set_recipient(self._init_recipient)
        if self._init_amount:
            self._form.set_bridge_from_amount(self._init_amount)
        logger.info(
            "Prefilled bridge form from URL (recipient=%s, amount=%s)",
            bool(self._init_recipient),
            bool(self._init_amount),
        )
        return self.initial_touched()

    def on_signer(self, signer: Optional[SignerProvider]) -> bool:
        """Strip the prefill params from the URL; returns True when the URL changed."""
        if signer is None or self._stripped or not self.has_params:
            return False

        self._store.delete(RECIPIENT_PARAM)
        self._store.delete(AMOUNT_PARAM)
        self._store.replace()
        self._stripped = True
        logger.debug("Removed recipient/amount query params after signer connected")
        return True
