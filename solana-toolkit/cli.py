#!/usr/bin/env python3
"""Solana NFT toolkit CLI."""

import argparse
import json
import logging
import sys

from errors import MintError
from mint_attempt import MintState
from mint_request import CreatorShare, MintParams
from toolkit import create_toolkit


def _creator(value: str) -> CreatorShare:
    """Parse ADDRESS:SHARE."""
    address, sep, share = value.rpartition(":")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected ADDRESS:SHARE, got {value!r}")
    try:
        return CreatorShare(address=address, share=int(share))
    except ValueError:
        raise argparse.ArgumentTypeError(f"share must be an integer: {value!r}")


def _params(args) -> MintParams:
    return MintParams(
        seller_fee_basis_points=args.fee_bps,
        symbol=args.symbol,
        name=args.name,
        metadata_uri=args.uri,
        creators=list(args.creator or []),
        is_mutable=not args.immutable,
    )


def _print_outcome(outcome) -> None:
    print(json.dumps(outcome.to_dict(), indent=2))
    if not outcome.ok:
        sys.exit(1)


def cmd_balance(args):
    """Show SOL balance."""
    tk = create_toolkit(keypair_path=args.keypair, network=args.network)
    bal = tk.ledger.balance(tk.pubkey)
    print(f"Wallet: {tk.pubkey}")
    print(f"Network: {args.network}")
    print(f"SOL Balance: {bal:.9f}")


def cmd_mint_nft(args):
    """Mint a Metaplex NFT."""
    tk = create_toolkit(keypair_path=args.keypair, network=args.network)
    _print_outcome(tk.nfts.mint_nft(_params(args)))


def cmd_resume_nft(args):
    """Finish a partially created NFT."""
    tk = create_toolkit(keypair_path=args.keypair, network=args.network)
    outcome = tk.nfts.resume_nft(_params(args), args.mint, completed=MintState(args.completed))
    _print_outcome(outcome)


def _add_mint_args(p):
    p.add_argument("--symbol", help="Token symbol (<= 10 bytes)")
    p.add_argument("--name", help="Token name (<= 32 bytes)")
    p.add_argument("--uri", default="", help="Off-chain metadata JSON URI")
    p.add_argument("--fee-bps", type=int, default=500, help="Seller fee in basis points")
    p.add_argument("--creator", type=_creator, action="append",
                   help="Creator as ADDRESS:SHARE, repeatable (default: own wallet at 100)")
    p.add_argument("--immutable", action="store_true", help="Make metadata immutable")


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(description="Solana NFT Toolkit")
    parser.add_argument("--keypair", help="Path to keypair file (default: WALLET_SECRET_KEY or SOLANA_KEYPAIR_PATH)")
    parser.add_argument("--network", default="devnet", help="Solana network")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    # balance
    sub.add_parser("balance", help="Show SOL balance")

    # mint-nft
    p = sub.add_parser("mint-nft", help="Mint a Metaplex NFT")
    _add_mint_args(p)

    # resume-nft
    p = sub.add_parser("resume-nft", help="Finish a partially created NFT")
    p.add_argument("--mint", required=True, help="Mint address reported by the failed run")
    p.add_argument("--completed", default=MintState.MINT_CREATED.value,
                   choices=[MintState.MINT_CREATED.value, MintState.METADATA_ATTACHED.value],
                   help="Last state the failed run reached")
    _add_mint_args(p)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )
    cmd_map = {
        "balance": cmd_balance,
        "mint-nft": cmd_mint_nft,
        "resume-nft": cmd_resume_nft,
    }
    try:
        cmd_map[args.command](args)
    except (MintError, ValueError, FileNotFoundError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
