"""Mint request types and the builder that turns raw input into a MintSpec."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from errors import ValidationError, ValidationReason
from settings import MintConfig


@dataclass(frozen=True)
class CreatorShare:
    address: str
    share: int

    @classmethod
    def parse(cls, value: Any) -> "CreatorShare":
        """Accept a CreatorShare, a {"address", "share"} dict or an (address, share) pair."""
        if isinstance(value, CreatorShare):
            return value
        if isinstance(value, dict):
            return cls(address=value["address"], share=value["share"])
        address, share = value
        return cls(address=address, share=share)


@dataclass
class MintParams:
    """Raw, unvalidated caller input for one NFT."""

    seller_fee_basis_points: int
    symbol: Optional[str] = None
    name: Optional[str] = None
    metadata_uri: str = ""
    creators: List[CreatorShare] = field(default_factory=list)
    is_mutable: bool = True

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MintParams":
        return cls(
            seller_fee_basis_points=data["seller_fee_basis_points"],
            symbol=data.get("symbol"),
            name=data.get("name"),
            metadata_uri=data.get("metadata_uri") or data.get("uri") or "",
            creators=[CreatorShare.parse(c) for c in data.get("creators") or []],
            is_mutable=data.get("is_mutable", True),
        )


@dataclass(frozen=True)
class MintSpec:
    """Canonical, immutable description of one NFT to mint."""

    name: str
    symbol: str
    metadata_uri: str
    seller_fee_basis_points: int
    creators: Tuple[CreatorShare, ...]
    mint_authority: str
    is_mutable: bool = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "symbol": self.symbol,
            "metadata_uri": self.metadata_uri,
            "seller_fee_basis_points": self.seller_fee_basis_points,
            "creators": [{"address": c.address, "share": c.share} for c in self.creators],
            "mint_authority": self.mint_authority,
            "is_mutable": self.is_mutable,
        }


def resolve_creators(
    params: MintParams, signer_address: str, config: MintConfig
) -> Tuple[CreatorShare, ...]:
    """Creators as they will be written: the signer at 100% when none given and the config says so."""
    creators = tuple(CreatorShare.parse(c) for c in params.creators)
    if not creators and config.default_creator_share_to_signer:
        return (CreatorShare(address=signer_address, share=100),)
    return creators


def build_mint_spec(params: MintParams, signer_address: str, config: MintConfig) -> MintSpec:
    """Build a MintSpec from input that has already passed validation.

    Missing name and URI become "". A missing or empty symbol is accepted only when
    config.allow_empty_symbol is set.

    Raises:
        ValidationError: If the symbol is missing or empty and empty symbols
            are not allowed.
    """
    if not params.symbol and not config.allow_empty_symbol:
        raise ValidationError(
            ValidationReason.EMPTY_SYMBOL, "symbol is required unless allow_empty_symbol is set"
        )

    return MintSpec(
        name=params.name or "",
        symbol=params.symbol or "",
        metadata_uri=params.metadata_uri or "",
        seller_fee_basis_points=params.seller_fee_basis_points,
        creators=resolve_creators(params, signer_address, config),
        mint_authority=signer_address,
        is_mutable=params.is_mutable,
    )
