"""Ledger capability: blockhashes, rent, transaction submission and confirmation."""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Protocol, Tuple

from solana.exceptions import SolanaRpcException
from solana.rpc.api import Client
from solana.rpc.core import RPCException
from solana.rpc.types import TxOpts
from solders.hash import Hash
from solders.instruction import Instruction
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.signature import Signature
from solders.transaction import Transaction
from solders.transaction_status import TransactionConfirmationStatus

from errors import TransientNetworkError
import settings

logger = logging.getLogger(__name__)


class TxStatus(Enum):
    CONFIRMED = "confirmed"
    REJECTED = "rejected"
    TIMED_OUT = "timed_out"


@dataclass(frozen=True)
class TransactionResult:
    status: TxStatus
    signature: Optional[str] = None
    error: Optional[str] = None

    @property
    def confirmed(self) -> bool:
        return self.status is TxStatus.CONFIRMED

    @property
    def rejected(self) -> bool:
        return self.status is TxStatus.REJECTED


@dataclass(frozen=True)
class UnsignedTransaction:
    """Instructions for one step, ready for the fee payer's signature."""

    instructions: Tuple[Instruction, ...]
    recent_blockhash: Hash
    co_signers: Tuple[Keypair, ...] = ()


class LedgerConnection(Protocol):
    def latest_blockhash(self) -> Hash: ...

    def minimum_rent(self, space: int) -> int: ...

    def submit(self, tx: Transaction, timeout: Optional[float] = None) -> TransactionResult: ...

    def status(self, signature: str) -> TransactionResult: ...


class SolanaLedger:
    """LedgerConnection over the solana-py RPC client.

    RPC failures, including JSON-RPC error responses, surface as
    TransientNetworkError. Only a transaction that lands with an error comes
    back as a REJECTED result.
    """

    def __init__(
        self,
        client: Client,
        commitment: str = "confirmed",
        default_timeout: float = 60.0,
        poll_interval: float = 1.0,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.client = client
        self.commitment = commitment
        self.default_timeout = default_timeout
        self.poll_interval = poll_interval
        self._sleep = sleep

    def latest_blockhash(self) -> Hash:
        try:
            return self.client.get_latest_blockhash().value.blockhash
        except (SolanaRpcException, RPCException) as e:
            raise TransientNetworkError(f"get_latest_blockhash failed: {e}")

    def minimum_rent(self, space: int) -> int:
        try:
            return self.client.get_minimum_balance_for_rent_exemption(space).value
        except (SolanaRpcException, RPCException) as e:
            raise TransientNetworkError(f"get_minimum_balance_for_rent_exemption failed: {e}")

    def balance(self, address: str) -> float:
        """
        Get the SOL balance of an address.

        Returns:
            float: The balance in SOL (9 decimal places).
        """
        try:
            response = self.client.get_balance(Pubkey.from_string(address))
        except (SolanaRpcException, RPCException) as e:
            raise TransientNetworkError(f"get_balance failed: {e}")
        return float(response.value) / 1e9

    def submit(self, tx: Transaction, timeout: Optional[float] = None) -> TransactionResult:
        """Send a signed transaction and poll until confirmed, failed or timed out."""
        signature = str(tx.signatures[0])
        try:
            resp = self.client.send_transaction(
                tx, opts=TxOpts(skip_preflight=True, preflight_commitment=self.commitment)
            )
        except (SolanaRpcException, RPCException) as e:
            # the node may have forwarded it anyway; only an on-chain err is a rejection
            raise TransientNetworkError(f"send_transaction failed: {e}", signature=signature)

        if resp.value is None:
            raise TransientNetworkError(f"Transaction not accepted: {resp}", signature=signature)
        signature = str(resp.value)
        logger.debug("Submitted %s", signature)

        deadline = time.monotonic() + (timeout if timeout is not None else self.default_timeout)
        while True:
            result = self.status(signature)
            if result.status is not TxStatus.TIMED_OUT or time.monotonic() >= deadline:
                return result
            self._sleep(self.poll_interval)

    def status(self, signature: str) -> TransactionResult:
        """Current status of a signature; TIMED_OUT while it is not yet confirmed."""
        try:
            resp = self.client.get_signature_statuses([Signature.from_string(signature)])
        except (SolanaRpcException, RPCException) as e:
            raise TransientNetworkError(f"get_signature_statuses failed: {e}", signature=signature)

        value = resp.value[0] if resp.value else None
        if value is None:
            return TransactionResult(TxStatus.TIMED_OUT, signature=signature)
        if value.err:
            return TransactionResult(TxStatus.REJECTED, signature=signature, error=str(value.err))
        if self.commitment != "processed" and value.confirmation_status == TransactionConfirmationStatus.Processed:
            return TransactionResult(TxStatus.TIMED_OUT, signature=signature)
        return TransactionResult(TxStatus.CONFIRMED, signature=signature)


def connect(
    network: str = settings.NETWORK,
    commitment: str = settings.COMMITMENT,
    default_timeout: float = 60.0,
    poll_interval: float = 1.0,
) -> SolanaLedger:
    """Open an RPC client for a cluster name ('devnet', 'testnet', 'mainnet-beta') or URL."""
    return SolanaLedger(
        Client(settings.rpc_url(network), commitment=commitment),
        commitment=commitment,
        default_timeout=default_timeout,
        poll_interval=poll_interval,
    )
