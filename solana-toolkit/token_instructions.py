"""SPL token instructions for creating a single-supply NFT mint."""

from typing import List

from solders.instruction import Instruction, AccountMeta
from solders.pubkey import Pubkey
from solders.system_program import ID as SYSTEM_PROGRAM_ID, CreateAccountParams, create_account

from spl.token.constants import TOKEN_PROGRAM_ID, ASSOCIATED_TOKEN_PROGRAM_ID
from spl.token.instructions import (
    initialize_mint, InitializeMintParams,
    mint_to, MintToParams,
    get_associated_token_address,
)

MINT_ACCOUNT_SIZE = 82


def _create_ata_ix(
    payer: Pubkey,
    owner: Pubkey,
    mint: Pubkey,
    token_program_id: Pubkey = TOKEN_PROGRAM_ID,
) -> Instruction:
    """Build a CreateAssociatedTokenAccount instruction."""
    ata = get_associated_token_address(owner, mint, token_program_id)
    keys = [
        AccountMeta(pubkey=payer, is_signer=True, is_writable=True),
        AccountMeta(pubkey=ata, is_signer=False, is_writable=True),
        AccountMeta(pubkey=owner, is_signer=False, is_writable=False),
        AccountMeta(pubkey=mint, is_signer=False, is_writable=False),
        AccountMeta(pubkey=SYSTEM_PROGRAM_ID, is_signer=False, is_writable=False),
        AccountMeta(pubkey=token_program_id, is_signer=False, is_writable=False),
    ]
    return Instruction(ASSOCIATED_TOKEN_PROGRAM_ID, bytes(), keys)


def create_nft_mint_ixs(payer: Pubkey, mint: Pubkey, rent_lamports: int) -> List[Instruction]:
    """
    Instructions that allocate a 0-decimal mint and mint exactly 1 token to the payer.

    The mint account must co-sign. Mint and freeze authority are the payer
    until the master edition takes them over.

    Args:
        payer: Fee payer, mint authority and token owner.
        mint: Address of the new mint account.
        rent_lamports: Rent-exempt balance for MINT_ACCOUNT_SIZE bytes.
    """
    ata = get_associated_token_address(payer, mint, TOKEN_PROGRAM_ID)
    return [
        create_account(CreateAccountParams(
            from_pubkey=payer,
            to_pubkey=mint,
            lamports=rent_lamports,
            space=MINT_ACCOUNT_SIZE,
            owner=TOKEN_PROGRAM_ID,
        )),
        initialize_mint(InitializeMintParams(
            program_id=TOKEN_PROGRAM_ID,
            mint=mint,
            decimals=0,
            mint_authority=payer,
            freeze_authority=payer,
        )),
        _create_ata_ix(payer, payer, mint, TOKEN_PROGRAM_ID),
        mint_to(MintToParams(
            program_id=TOKEN_PROGRAM_ID,
            mint=mint,
            dest=ata,
            mint_authority=payer,
            amount=1,
            signers=[payer],
        )),
    ]
