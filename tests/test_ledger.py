from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from solana.exceptions import SolanaRpcException
from solana.rpc.core import RPCException
from solders.hash import Hash
from solders.keypair import Keypair
from solders.signature import Signature
from solders.system_program import TransferParams, transfer
from solders.transaction_status import TransactionConfirmationStatus

from errors import TransientNetworkError
from ledger import SolanaLedger, TxStatus, UnsignedTransaction


@pytest.fixture
def signed_tx(wallet):
    ix = transfer(TransferParams(from_pubkey=wallet.pubkey, to_pubkey=Keypair().pubkey(), lamports=1))
    return wallet.sign(UnsignedTransaction((ix,), Hash.new_unique()))


def _status(err=None, confirmation=TransactionConfirmationStatus.Confirmed):
    return SimpleNamespace(value=[SimpleNamespace(err=err, confirmation_status=confirmation)])


def _ledger(client):
    sleeps = []
    return SolanaLedger(client, default_timeout=0.0, poll_interval=0.1, sleep=sleeps.append), sleeps


def test_submit_confirmed(signed_tx):
    client = MagicMock()
    client.send_transaction.return_value = SimpleNamespace(value=signed_tx.signatures[0])
    client.get_signature_statuses.return_value = _status()
    ledger, _ = _ledger(client)
    result = ledger.submit(signed_tx)
    assert result.confirmed
    assert result.signature == str(signed_tx.signatures[0])


def test_submit_landed_with_error_is_rejected(signed_tx):
    client = MagicMock()
    client.send_transaction.return_value = SimpleNamespace(value=signed_tx.signatures[0])
    client.get_signature_statuses.return_value = _status(err="InsufficientFundsForRent")
    ledger, _ = _ledger(client)
    result = ledger.submit(signed_tx)
    assert result.rejected
    assert "InsufficientFundsForRent" in result.error


def test_submit_rpc_error_is_transient(signed_tx):
    # an RPC error response says nothing about whether the transaction lands
    client = MagicMock()
    client.send_transaction.side_effect = RPCException("Node is behind by 42 slots")
    ledger, _ = _ledger(client)
    with pytest.raises(TransientNetworkError) as excinfo:
        ledger.submit(signed_tx)
    assert excinfo.value.signature == str(signed_tx.signatures[0])


def test_submit_connectivity_error_is_transient(signed_tx):
    client = MagicMock()
    client.send_transaction.side_effect = SolanaRpcException(Exception("connection refused"), client.send_transaction)
    ledger, _ = _ledger(client)
    with pytest.raises(TransientNetworkError) as excinfo:
        ledger.submit(signed_tx)
    assert excinfo.value.signature == str(signed_tx.signatures[0])


def test_submit_times_out_when_never_seen(signed_tx):
    client = MagicMock()
    client.send_transaction.return_value = SimpleNamespace(value=signed_tx.signatures[0])
    client.get_signature_statuses.return_value = SimpleNamespace(value=[None])
    ledger, _ = _ledger(client)
    assert ledger.submit(signed_tx, timeout=0.0).status is TxStatus.TIMED_OUT


def test_submit_polls_until_confirmed(signed_tx):
    client = MagicMock()
    client.send_transaction.return_value = SimpleNamespace(value=signed_tx.signatures[0])
    client.get_signature_statuses.side_effect = [SimpleNamespace(value=[None]), _status()]
    ledger, sleeps = _ledger(client)
    assert ledger.submit(signed_tx, timeout=30.0).confirmed
    assert sleeps == [0.1]


def test_processed_is_not_yet_confirmed(signed_tx):
    client = MagicMock()
    client.get_signature_statuses.return_value = _status(confirmation=TransactionConfirmationStatus.Processed)
    ledger, _ = _ledger(client)
    assert ledger.status(str(signed_tx.signatures[0])).status is TxStatus.TIMED_OUT


def test_blockhash_and_rent_errors_are_transient():
    client = MagicMock()
    client.get_latest_blockhash.side_effect = SolanaRpcException(Exception("timeout"), client.get_latest_blockhash)
    client.get_minimum_balance_for_rent_exemption.side_effect = SolanaRpcException(
        Exception("timeout"), client.get_minimum_balance_for_rent_exemption
    )
    ledger, _ = _ledger(client)
    with pytest.raises(TransientNetworkError):
        ledger.latest_blockhash()
    with pytest.raises(TransientNetworkError):
        ledger.minimum_rent(82)


@pytest.mark.parametrize("call", [
    lambda ledger: ledger.latest_blockhash(),
    lambda ledger: ledger.minimum_rent(82),
    lambda ledger: ledger.status(str(Signature.default())),
    lambda ledger: ledger.balance(str(Keypair().pubkey())),
])
def test_rpc_error_responses_are_transient(call):
    client = MagicMock()
    error = RPCException("Node is behind by 42 slots")
    client.get_latest_blockhash.side_effect = error
    client.get_minimum_balance_for_rent_exemption.side_effect = error
    client.get_signature_statuses.side_effect = error
    client.get_balance.side_effect = error
    ledger, _ = _ledger(client)
    with pytest.raises(TransientNetworkError):
        call(ledger)


def test_balance_in_sol(wallet):
    client = MagicMock()
    client.get_balance.return_value = SimpleNamespace(value=1_500_000_000)
    ledger, _ = _ledger(client)
    assert ledger.balance(wallet.public_address()) == 1.5
