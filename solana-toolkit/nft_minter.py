"""Metaplex NFT minting: validate input, build the MintSpec, run the mint.

Validation failures raise before anything is sent to the network. Every
later failure comes back inside the MintOutcome.
"""

import logging
import threading
from typing import Optional

from mint_attempt import MintState
from mint_orchestrator import MintOrchestrator
from mint_reporter import MintOutcome
from mint_request import MintParams, MintSpec, build_mint_spec, resolve_creators
from royalties import validate, validate_metadata
from settings import MintConfig

logger = logging.getLogger(__name__)


def prepare_mint_spec(params: MintParams, signer_address: str, config: MintConfig) -> MintSpec:
    """Validate raw params and build the MintSpec.

    Raises:
        ValidationError: If any field breaks a royalty, creator or metadata rule.
    """
    validate_metadata(params.name, params.symbol, params.metadata_uri, config.allow_empty_symbol)
    validate(
        params.seller_fee_basis_points,
        resolve_creators(params, signer_address, config),
        allow_empty_creators=config.allow_empty_creators,
    )
    return build_mint_spec(params, signer_address, config)


class NFTMinter:
    """Mint one-of-one Metaplex NFTs with a wallet over a ledger connection."""

    def __init__(self, orchestrator: MintOrchestrator):
        self.orchestrator = orchestrator
        self.config = orchestrator.config

    @property
    def signer_address(self) -> str:
        return self.orchestrator.signer.public_address()

    def prepare(self, params: MintParams) -> MintSpec:
        return prepare_mint_spec(params, self.signer_address, self.config)

    def mint_nft(self, params: MintParams, cancel_event: Optional[threading.Event] = None) -> MintOutcome:
        """Mint an NFT.

        Args:
            params: Raw mint parameters.
            cancel_event: Honored between steps only.

        Returns:
            MintOutcome: Final state, mint address (if created) and last error.

        Raises:
            ValidationError: If params are invalid; nothing was sent.
        """
        spec = self.prepare(params)
        logger.info(
            "Minting %r (%s), %d bps royalty, %d creator(s)",
            spec.name, spec.symbol, spec.seller_fee_basis_points, len(spec.creators),
        )
        return self.orchestrator.mint(spec, cancel_event=cancel_event)

    def resume_nft(
        self,
        params: MintParams,
        mint_address: str,
        completed: MintState = MintState.MINT_CREATED,
        cancel_event: Optional[threading.Event] = None,
    ) -> MintOutcome:
        """Finish a PartialMint with the same params it was started with."""
        spec = self.prepare(params)
        return self.orchestrator.resume(spec, mint_address, completed=completed, cancel_event=cancel_event)
