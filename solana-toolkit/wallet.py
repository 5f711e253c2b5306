import json
from pathlib import Path
from typing import Optional, Protocol

from solders.keypair import Keypair
from solders.message import Message
from solders.transaction import Transaction

from ledger import UnsignedTransaction


class Signer(Protocol):
    """Anything that can pay for and sign mint transactions."""

    def public_address(self) -> str: ...

    def sign(self, tx: UnsignedTransaction) -> Transaction: ...


def _keypair_from_secret(secret) -> Keypair:
    try:
        return Keypair.from_bytes(bytes(secret))
    except (ValueError, TypeError) as e:
        raise ValueError(f"Invalid keypair format: {e}")


class SolanaWallet:
    """A Solana wallet wrapper: keypair loading and transaction signing.

    Signing is stateless, so one wallet can be shared by concurrent mints.
    """

    def __init__(self, keypair_path: str = "~/.config/solana/id.json", keypair: Optional[Keypair] = None):
        """
        Load the keypair from a JSON keypair file, unless one is given directly.

        Args:
            keypair_path: Path to the JSON keypair file. Defaults to ~/.config/solana/id.json.
            keypair: Already loaded keypair; skips the file.

        Raises:
            FileNotFoundError: If the keypair file does not exist.
            ValueError: If the keypair file contains invalid data.
        """
        if keypair is not None:
            self.keypair = keypair
        else:
            expanded_path = Path(keypair_path).expanduser()

            if not expanded_path.exists():
                raise FileNotFoundError(f"Keypair file not found: {expanded_path}")

            try:
                with open(expanded_path, 'r') as f:
                    secret_key = json.load(f)
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid keypair file format: {e}")
            self.keypair = _keypair_from_secret(secret_key)

        self.pubkey = self.keypair.pubkey()

    @classmethod
    def from_secret(cls, secret_json: str) -> "SolanaWallet":
        """
        Build a wallet from a JSON byte array, e.g. the WALLET_SECRET_KEY env var.

        Raises:
            ValueError: If the secret is not a valid 64-byte keypair array.
        """
        try:
            secret = json.loads(secret_json)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid wallet secret: {e}")
        return cls(keypair=_keypair_from_secret(secret))

    def public_address(self) -> str:
        return str(self.pubkey)

    def sign(self, tx: UnsignedTransaction) -> Transaction:
        """
        Sign as fee payer, together with any co-signers the transaction carries.

        Returns:
            Transaction: Fully signed transaction ready to submit.
        """
        message = Message.new_with_blockhash(list(tx.instructions), self.pubkey, tx.recent_blockhash)
        return Transaction([self.keypair, *tx.co_signers], message, tx.recent_blockhash)
