import os

from pathlib import Path
from typing import Any, Dict, List

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .services.address import is_supported_chain, normalize_chain


BASE_DIR = Path(__file__).resolve().parents[1]


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=BASE_DIR / ".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    def model_post_init(self, __context: Any) -> None:
        """Pick up the legacy RPC URL alias when the primary one is unset."""

        super().model_post_init(__context)

        if not self.bridge_rpc_url:
            fallback = os.getenv("FORCE_BRIDGE_RPC_URL")
            if fallback:
                object.__setattr__(self, "bridge_rpc_url", fallback)

    log_level: str = Field(default="INFO", description="Logging level")

    # Bridge RPC
    bridge_rpc_url: str = Field(default="", description="JSON-RPC endpoint of the bridge service")
    request_timeout_seconds: int = Field(default=30, description="Request timeout")

    # Chains
    native_chain: str = Field(
        default="ethereum",
        description="Address family of the native chain (assets bridged In originate here)",
    )
    counterpart_chain: str = Field(
        default="ckb",
        description="Address family of the counterpart chain holding shadow assets",
    )
    counterpart_symbol: str = Field(default="CKB", description="Currency label of the counterpart chain")
    counterpart_network: str = Field(default="Nervos", description="Network name of the counterpart chain")

    # Networks
    ethereum_chain_id: int = Field(default=1, description="EVM chain id expected for the Ethereum network")
    bsc_chain_id: int = Field(default=56, description="EVM chain id expected for the BSC network")
    ethereum_bridge_contract: str = Field(
        default="",
        description="Bridge contract that spends approved tokens on Ethereum",
    )
    bsc_bridge_contract: str = Field(
        default="",
        description="Bridge contract that spends approved tokens on BSC",
    )
    ethereum_rpc_url: str = Field(default="", description="EVM JSON-RPC endpoint used to read Ethereum allowances")
    bsc_rpc_url: str = Field(default="", description="EVM JSON-RPC endpoint used to read BSC allowances")

    # Orchestrator policy
    require_connected_wallet: bool = Field(
        default=True,
        description="Reject submissions while no signer is connected",
    )
    approval_directions: str = Field(
        default="Out",
        description="Comma separated bridge directions whose spendable token needs an allowance",
    )

    @field_validator("native_chain", "counterpart_chain")
    @classmethod
    def _check_chain(cls, value: str) -> str:
        if not is_supported_chain(value):
            raise ValueError(f"Unsupported chain: {value!r}")
        return normalize_chain(value)

    @field_validator("approval_directions")
    @classmethod
    def _check_directions(cls, value: str) -> str:
        normalized = []
        for item in value.split(","):
            item = item.strip()
            if not item:
                continue
            canonical = item.capitalize()
            if canonical not in {"In", "Out"}:
                raise ValueError(f"Unknown bridge direction: {item!r}")
            normalized.append(canonical)
        return ",".join(normalized)

    def approval_direction_names(self) -> List[str]:
        return [item for item in self.approval_directions.split(",") if item]

    def network_chain_ids(self) -> Dict[str, int]:
        return {"Ethereum": self.ethereum_chain_id, "BSC": self.bsc_chain_id}

    def bridge_contracts(self) -> Dict[str, str]:
        return {"Ethereum": self.ethereum_bridge_contract, "BSC": self.bsc_bridge_contract}

    def network_rpc_urls(self) -> Dict[str, str]:
        return {"Ethereum": self.ethereum_rpc_url, "BSC": self.bsc_rpc_url}


settings = Settings()
