"""Royalty and creator-share rules for Metaplex metadata.

Pure functions: nothing here touches the network.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from solders.pubkey import Pubkey

from errors import ValidationError, ValidationReason
from mint_request import CreatorShare

MAX_BASIS_POINTS = 10000
MAX_CREATORS = 5  # Metaplex MAX_CREATOR_LIMIT
MAX_NAME_LENGTH = 32
MAX_SYMBOL_LENGTH = 10
MAX_URI_LENGTH = 200


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate(
    seller_fee_basis_points: int,
    creators: Sequence[CreatorShare],
    allow_empty_creators: bool = False,
) -> None:
    """Check royalty basis points and creator shares.

    Args:
        seller_fee_basis_points: Royalty, 0-10000.
        creators: Ordered creator/share pairs.
        allow_empty_creators: Accept an empty list (no creators on chain).

    Raises:
        ValidationError: On the first violated rule.
    """
    if not _is_int(seller_fee_basis_points) or not 0 <= seller_fee_basis_points <= MAX_BASIS_POINTS:
        raise ValidationError(
            ValidationReason.FEE_OUT_OF_RANGE,
            f"seller_fee_basis_points must be in [0, {MAX_BASIS_POINTS}], got {seller_fee_basis_points!r}",
        )

    if not creators:
        if allow_empty_creators:
            return
        raise ValidationError(ValidationReason.EMPTY_CREATOR_LIST, "at least one creator is required")

    if len(creators) > MAX_CREATORS:
        raise ValidationError(
            ValidationReason.TOO_MANY_CREATORS,
            f"at most {MAX_CREATORS} creators allowed, got {len(creators)}",
        )

    for creator in creators:
        if not _is_int(creator.share) or not 0 <= creator.share <= 100:
            raise ValidationError(
                ValidationReason.SHARE_OUT_OF_RANGE,
                f"share for {creator.address} must be in [0, 100], got {creator.share!r}",
            )

    total = sum(c.share for c in creators)
    if total != 100:
        raise ValidationError(
            ValidationReason.SHARES_DO_NOT_SUM_TO_100,
            f"creator shares must sum to 100, got {total}",
        )

    seen = set()
    for creator in creators:
        if creator.address in seen:
            raise ValidationError(
                ValidationReason.DUPLICATE_CREATOR_ADDRESS,
                f"duplicate creator address: {creator.address}",
            )
        seen.add(creator.address)

    for creator in creators:
        try:
            Pubkey.from_string(creator.address)
        except ValueError:
            raise ValidationError(
                ValidationReason.INVALID_CREATOR_ADDRESS,
                f"not a valid public key: {creator.address!r}",
            )


def validate_metadata(
    name: Optional[str],
    symbol: Optional[str],
    uri: Optional[str],
    allow_empty_symbol: bool = False,
) -> None:
    """Check metadata string fields against Metaplex limits (UTF-8 bytes)."""
    if not symbol and not allow_empty_symbol:
        raise ValidationError(ValidationReason.EMPTY_SYMBOL, "symbol is required")
    if symbol and len(symbol.encode("utf-8")) > MAX_SYMBOL_LENGTH:
        raise ValidationError(
            ValidationReason.SYMBOL_TOO_LONG,
            f"symbol exceeds {MAX_SYMBOL_LENGTH} bytes: {symbol!r}",
        )
    if name and len(name.encode("utf-8")) > MAX_NAME_LENGTH:
        raise ValidationError(
            ValidationReason.NAME_TOO_LONG,
            f"name exceeds {MAX_NAME_LENGTH} bytes: {name!r}",
        )
    if uri and len(uri.encode("utf-8")) > MAX_URI_LENGTH:
        raise ValidationError(
            ValidationReason.URI_TOO_LONG,
            f"uri exceeds {MAX_URI_LENGTH} bytes",
        )


@dataclass(frozen=True)
class RoyaltySplit:
    royalty: int
    payouts: Dict[str, int]
    seller_proceeds: int


def split_royalties(
    sale_price: int,
    seller_fee_basis_points: int,
    creators: Sequence[CreatorShare],
) -> RoyaltySplit:
    """Divide a secondary sale between creators and the seller.

    Amounts are integer lamports. Rounding dust stays with the seller, so
    payouts plus seller proceeds always equal the sale price.
    """
    if not _is_int(sale_price) or sale_price < 0:
        raise ValueError(f"sale_price must be a non-negative integer, got {sale_price!r}")
    validate(seller_fee_basis_points, creators, allow_empty_creators=True)

    if not creators:
        return RoyaltySplit(royalty=0, payouts={}, seller_proceeds=sale_price)

    royalty = sale_price * seller_fee_basis_points // MAX_BASIS_POINTS
    payouts = {c.address: royalty * c.share // 100 for c in creators}
    return RoyaltySplit(
        royalty=royalty,
        payouts=payouts,
        seller_proceeds=sale_price - sum(payouts.values()),
    )
