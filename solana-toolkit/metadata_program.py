"""Metaplex Token Metadata instructions, Borsh-encoded by hand.

Only the two instructions a one-of-one NFT needs: CreateMetadataAccountV3
and CreateMasterEditionV3. Layouts follow mpl-token-metadata.
"""

import struct
from typing import Optional, Sequence

from solders.instruction import Instruction, AccountMeta
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID
from solders.sysvar import RENT

from spl.token.constants import TOKEN_PROGRAM_ID

from mint_request import CreatorShare

TOKEN_METADATA_PROGRAM_ID = Pubkey.from_string("metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s")

# Instruction discriminators (single byte, not Anchor-style)
IX_CREATE_MASTER_EDITION_V3 = 17
IX_CREATE_METADATA_ACCOUNT_V3 = 33


def find_metadata_pda(mint: Pubkey) -> Pubkey:
    seeds = [b"metadata", bytes(TOKEN_METADATA_PROGRAM_ID), bytes(mint)]
    return Pubkey.find_program_address(seeds, TOKEN_METADATA_PROGRAM_ID)[0]


def find_master_edition_pda(mint: Pubkey) -> Pubkey:
    seeds = [b"metadata", bytes(TOKEN_METADATA_PROGRAM_ID), bytes(mint), b"edition"]
    return Pubkey.find_program_address(seeds, TOKEN_METADATA_PROGRAM_ID)[0]


def _encode_string(value: str) -> bytes:
    """Borsh string: u32 length prefix + utf-8 bytes."""
    raw = value.encode("utf-8")
    return struct.pack("<I", len(raw)) + raw


def _encode_creators(creators: Sequence[CreatorShare], update_authority: Pubkey) -> bytes:
    """Option<Vec<Creator>>; a creator equal to the signing update authority is verified."""
    if not creators:
        return b"\x00"
    data = b"\x01" + struct.pack("<I", len(creators))
    for creator in creators:
        address = Pubkey.from_string(creator.address)
        data += bytes(address) + struct.pack("<?B", address == update_authority, creator.share)
    return data


def encode_data_v2(
    name: str,
    symbol: str,
    uri: str,
    seller_fee_basis_points: int,
    creators: Sequence[CreatorShare],
    update_authority: Pubkey,
) -> bytes:
    """DataV2 with no collection and no uses."""
    return (
        _encode_string(name)
        + _encode_string(symbol)
        + _encode_string(uri)
        + struct.pack("<H", seller_fee_basis_points)
        + _encode_creators(creators, update_authority)
        + b"\x00"  # collection
        + b"\x00"  # uses
    )


def create_metadata_account_v3_ix(
    mint: Pubkey,
    authority: Pubkey,
    name: str,
    symbol: str,
    uri: str,
    seller_fee_basis_points: int,
    creators: Sequence[CreatorShare],
    is_mutable: bool = True,
) -> Instruction:
    """
    Build CreateMetadataAccountV3 with `authority` as mint authority, payer and update authority.

    Args:
        mint: Mint the metadata is bound to.
        authority: Signing wallet.
        name: Token name (<= 32 bytes).
        symbol: Ticker (<= 10 bytes).
        uri: Off-chain JSON metadata URI (<= 200 bytes).
        seller_fee_basis_points: Royalty in basis points.
        creators: Creator shares; empty encodes None.
        is_mutable: Whether the update authority may change metadata later.
    """
    data = (
        struct.pack("<B", IX_CREATE_METADATA_ACCOUNT_V3)
        + encode_data_v2(name, symbol, uri, seller_fee_basis_points, creators, authority)
        + struct.pack("<?", is_mutable)
        + b"\x00"  # collection_details
    )
    accounts = [
        AccountMeta(pubkey=find_metadata_pda(mint), is_signer=False, is_writable=True),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=RENT, is_signer=False, is_writable=False),
    ]
    return Instruction(TOKEN_METADATA_PROGRAM_ID, data, accounts)


def create_master_edition_v3_ix(
    mint: Pubkey,
    authority: Pubkey,
    max_supply: Optional[int] = 0,
) -> Instruction:
    """
    Build CreateMasterEditionV3. The edition PDA takes over mint and freeze
    authority, so with max_supply=0 no further tokens or prints can exist.
    """
    if max_supply is None:
        supply = b"\x00"
    else:
        supply = b"\x01" + struct.pack("<Q", max_supply)
    data = struct.pack("<B", IX_CREATE_MASTER_EDITION_V3) + supply
    accounts = [
        AccountMeta(pubkey=find_master_edition_pda(mint), is_signer=False, is_writable=True),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=True),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=False),
        AccountMeta(pubkey=authority, is_signer=True, is_writable=True),
        AccountMeta(pubkey=find_metadata_pda(mint), is_signer=False, is_writable=True),
        AccountMeta(pubkey=TOKEN_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=RENT, is_signer=False, is_writable=False),
    ]
    return Instruction(TOKEN_METADATA_PROGRAM_ID, data, accounts)
