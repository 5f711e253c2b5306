"""Solana NFT toolkit: unified entry point."""

from typing import Optional

import settings
from ledger import SolanaLedger, connect
from mint_orchestrator import MintOrchestrator
from nft_minter import NFTMinter
from settings import MintConfig
from wallet import SolanaWallet


class NFTToolkit:
    """Facade combining the ledger connection, wallet and NFT minter."""

    def __init__(self, wallet: SolanaWallet, ledger: SolanaLedger, config: Optional[MintConfig] = None):
        self.wallet = wallet
        self.ledger = ledger
        self.config = config or MintConfig()
        self.nfts = NFTMinter(MintOrchestrator(ledger, wallet, self.config))

    @property
    def pubkey(self) -> str:
        """Return wallet public key as string."""
        return self.wallet.public_address()


def load_wallet(keypair_path: Optional[str] = None) -> SolanaWallet:
    """
    Load the signing wallet: WALLET_SECRET_KEY if set, else the keypair file.

    Args:
        keypair_path: Keypair file; overrides the environment when given.
    """
    if keypair_path is None and settings.WALLET_SECRET_KEY:
        return SolanaWallet.from_secret(settings.WALLET_SECRET_KEY)
    return SolanaWallet(keypair_path=keypair_path or settings.KEYPAIR_PATH)


def create_toolkit(
    keypair_path: Optional[str] = None,
    network: str = settings.NETWORK,
    config: Optional[MintConfig] = None,
) -> NFTToolkit:
    """
    Factory function to create a fully initialized NFTToolkit.

    Args:
        keypair_path: Path to Solana keypair JSON file; None uses the environment.
        network: Solana network name or RPC URL.
        config: Mint policy; defaults to MintConfig.from_env().

    Returns:
        NFTToolkit: Initialized toolkit with wallet, ledger, nfts.
    """
    config = config or MintConfig.from_env()
    ledger = connect(network, poll_interval=config.poll_interval, default_timeout=config.step_timeout)
    return NFTToolkit(load_wallet(keypair_path), ledger, config)
