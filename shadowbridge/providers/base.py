from abc import ABC, abstractmethod
from typing import Any, Optional

from ..core.bridge.models import Asset, AssetQueryResult


class SignerProvider(ABC):
    """Connected wallet able to sign on both chains"""

    @abstractmethod
    def identity_native(self) -> str:
        """Address of the signer on the native chain"""
        pass

    @abstractmethod
    def identity_counterpart(self) -> str:
        """Address of the signer on the counterpart chain"""
        pass


class AssetQueryService(ABC):
    """Source of bridgeable assets and their shadows"""

    @abstractmethod
    async def query_assets(self) -> AssetQueryResult:
        """Fetch assets for both chains, shadows populated"""
        pass


class AllowanceSource(ABC):
    """Read path for approved token allowances"""

    @abstractmethod
    async def get_allowance(self, owner: str, spender: str, asset: Asset) -> int:
        """Base units ``spender`` may currently move on behalf of ``owner``"""
        pass


class BridgeBroadcaster(ABC):
    """Signs and broadcasts the requests the orchestrator shapes"""

    @abstractmethod
    async def send_approve(self, asset: Asset, add_approve: int) -> Any:
        """Raise the allowance of ``asset`` by ``add_approve`` base units"""
        pass

    @abstractmethod
    async def send_transfer(self, asset: Asset, recipient: str) -> Any:
        """Bridge ``asset.amount`` of ``asset`` to ``recipient``"""
        pass


class QueryStore(ABC):
    """URL query parameters of the current page"""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def replace(self) -> None:
        """Write the current parameters back without adding a history entry"""
        pass
