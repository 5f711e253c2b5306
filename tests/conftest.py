from dataclasses import replace
from typing import Dict, List, Optional

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.transaction import Transaction

from errors import TransientNetworkError
from ledger import TransactionResult, TxStatus
from metadata_program import IX_CREATE_MASTER_EDITION_V3, IX_CREATE_METADATA_ACCOUNT_V3, TOKEN_METADATA_PROGRAM_ID
from mint_orchestrator import MintOrchestrator
from mint_request import CreatorShare, MintParams
from settings import MintConfig
from wallet import SolanaWallet

RENT = 1461600


def step_of(tx: Transaction) -> str:
    """Which mint step a submitted transaction belongs to."""
    message = tx.message
    for ix in message.instructions:
        program = message.account_keys[ix.program_id_index]
        if program == TOKEN_METADATA_PROGRAM_ID:
            if bytes(ix.data)[0] == IX_CREATE_METADATA_ACCOUNT_V3:
                return "attach_metadata"
            if bytes(ix.data)[0] == IX_CREATE_MASTER_EDITION_V3:
                return "finalize"
    return "create_mint"


class FakeLedger:
    """In-memory ledger. Outcomes are consumed per submit, per step.

    Outcome names: "ok", "reject", "timeout", "late" (times out, then shows
    as confirmed on a status check) and "network" (raises).
    """

    def __init__(self, outcomes: Optional[Dict[str, List[str]]] = None):
        self.outcomes = {k: list(v) for k, v in (outcomes or {}).items()}
        self.submitted: List[Transaction] = []
        self.steps: List[str] = []
        self.status_checks: List[str] = []
        self.late: Dict[str, TransactionResult] = {}
        self.hook = None

    def latest_blockhash(self) -> Hash:
        return Hash.new_unique()

    def minimum_rent(self, space: int) -> int:
        return RENT

    def submit(self, tx: Transaction, timeout: Optional[float] = None) -> TransactionResult:
        step = step_of(tx)
        self.submitted.append(tx)
        self.steps.append(step)
        if self.hook is not None:
            self.hook(step)
        signature = str(tx.signatures[0])
        queue = self.outcomes.get(step) or []
        outcome = queue.pop(0) if queue else "ok"
        if outcome == "network":
            raise TransientNetworkError("connection reset by peer")
        if outcome == "reject":
            return TransactionResult(TxStatus.REJECTED, signature, "custom program error: 0x1")
        if outcome == "timeout":
            return TransactionResult(TxStatus.TIMED_OUT, signature)
        if outcome == "late":
            self.late[signature] = TransactionResult(TxStatus.CONFIRMED, signature)
            return TransactionResult(TxStatus.TIMED_OUT, signature)
        return TransactionResult(TxStatus.CONFIRMED, signature)

    def status(self, signature: str) -> TransactionResult:
        self.status_checks.append(signature)
        return self.late.get(signature, TransactionResult(TxStatus.TIMED_OUT, signature))


@pytest.fixture
def wallet():
    return SolanaWallet(keypair=Keypair())


@pytest.fixture
def config():
    return MintConfig(max_retries=2, backoff_base=0.5, backoff_max=4.0, step_timeout=5.0)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_orchestrator(wallet, config, sleeps):
    def _make(ledger, **overrides):
        cfg = replace(config, **overrides)
        return MintOrchestrator(ledger, wallet, cfg, sleep=sleeps.append)
    return _make


@pytest.fixture
def other_creator():
    return str(Keypair().pubkey())


@pytest.fixture
def params(wallet):
    return MintParams(
        seller_fee_basis_points=500,
        symbol="NFT",
        name="Test NFT",
        metadata_uri="https://example.com/nft.json",
        creators=[CreatorShare(wallet.public_address(), 100)],
    )
