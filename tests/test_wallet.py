import json

import pytest
from solders.hash import Hash
from solders.keypair import Keypair
from solders.system_program import TransferParams, transfer

from ledger import UnsignedTransaction
from wallet import SolanaWallet


def test_load_from_keypair_file(tmp_path):
    keypair = Keypair()
    path = tmp_path / "id.json"
    path.write_text(json.dumps(list(bytes(keypair))))
    wallet = SolanaWallet(keypair_path=str(path))
    assert wallet.public_address() == str(keypair.pubkey())


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        SolanaWallet(keypair_path=str(tmp_path / "nope.json"))


def test_invalid_file(tmp_path):
    path = tmp_path / "id.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        SolanaWallet(keypair_path=str(path))


def test_from_secret_env_format():
    keypair = Keypair()
    wallet = SolanaWallet.from_secret(json.dumps(list(bytes(keypair))))
    assert wallet.pubkey == keypair.pubkey()
    with pytest.raises(ValueError):
        SolanaWallet.from_secret("not json")


def test_sign_as_fee_payer_with_cosigner(wallet):
    cosigner = Keypair()
    ix = transfer(TransferParams(from_pubkey=cosigner.pubkey(), to_pubkey=Keypair().pubkey(), lamports=5))
    tx = wallet.sign(UnsignedTransaction((ix,), Hash.new_unique(), (cosigner,)))
    assert tx.message.account_keys[0] == wallet.pubkey
    assert len(tx.signatures) == 2
    tx.verify()
