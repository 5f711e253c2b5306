"""Configuration: network, wallet secret and mint retry policy from env."""

import os
from dataclasses import dataclass

from dotenv import load_dotenv

load_dotenv()

NETWORK = os.getenv("NETWORK", "devnet")
# JSON byte array, same format as the solana CLI keypair file
WALLET_SECRET_KEY = os.getenv("WALLET_SECRET_KEY", "")
KEYPAIR_PATH = os.getenv("SOLANA_KEYPAIR_PATH", "~/.config/solana/id.json")
COMMITMENT = os.getenv("SOLANA_COMMITMENT", "confirmed")

RPC_URLS = {
    "devnet": "https://api.devnet.solana.com",
    "testnet": "https://api.testnet.solana.com",
    "mainnet-beta": "https://api.mainnet-beta.solana.com",
}


def rpc_url(network: str = NETWORK) -> str:
    """Map a cluster name to its RPC endpoint; anything else is taken as a URL."""
    return RPC_URLS.get(network, network)


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes")


@dataclass(frozen=True)
class MintConfig:
    """Policy knobs for building and submitting a mint.

    Args:
        allow_empty_creators: Permit a mint with no creators (creators=None on chain).
        default_creator_share_to_signer: Use the signer as sole 100% creator
            when none are supplied.
        allow_empty_symbol: Permit a missing symbol, stored as "".
        max_retries: Retries per step after the first try, for transient failures only.
        backoff_base: Seconds before the first retry; doubles each retry.
        backoff_max: Upper bound on a single backoff delay.
        step_timeout: Seconds to wait for a step's confirmation.
        poll_interval: Seconds between confirmation polls.
    """

    allow_empty_creators: bool = False
    default_creator_share_to_signer: bool = True
    allow_empty_symbol: bool = False
    max_retries: int = 3
    backoff_base: float = 0.5
    backoff_max: float = 8.0
    step_timeout: float = 60.0
    poll_interval: float = 1.0

    def backoff(self, retry: int) -> float:
        """Delay before the given retry (1-based)."""
        return min(self.backoff_base * (2 ** (retry - 1)), self.backoff_max)

    @classmethod
    def from_env(cls) -> "MintConfig":
        return cls(
            allow_empty_creators=_env_flag("NFT_ALLOW_EMPTY_CREATORS", False),
            default_creator_share_to_signer=_env_flag("NFT_DEFAULT_CREATOR_TO_SIGNER", True),
            allow_empty_symbol=_env_flag("NFT_ALLOW_EMPTY_SYMBOL", False),
            max_retries=int(os.getenv("NFT_MAX_RETRIES", "3")),
            backoff_base=float(os.getenv("NFT_BACKOFF_BASE", "0.5")),
            backoff_max=float(os.getenv("NFT_BACKOFF_MAX", "8.0")),
            step_timeout=float(os.getenv("NFT_STEP_TIMEOUT", "60")),
            poll_interval=float(os.getenv("NFT_POLL_INTERVAL", "1.0")),
        )
