import settings
from settings import MintConfig


def test_rpc_url_mapping():
    assert settings.rpc_url("devnet") == "https://api.devnet.solana.com"
    assert settings.rpc_url("http://localhost:8899") == "http://localhost:8899"


def test_backoff_doubles_and_caps():
    config = MintConfig(backoff_base=1.0, backoff_max=5.0)
    assert [config.backoff(n) for n in range(1, 5)] == [1.0, 2.0, 4.0, 5.0]


def test_config_from_env(monkeypatch):
    monkeypatch.setenv("NFT_MAX_RETRIES", "7")
    monkeypatch.setenv("NFT_STEP_TIMEOUT", "12.5")
    monkeypatch.setenv("NFT_ALLOW_EMPTY_SYMBOL", "yes")
    monkeypatch.setenv("NFT_DEFAULT_CREATOR_TO_SIGNER", "0")
    config = MintConfig.from_env()
    assert config.max_retries == 7
    assert config.step_timeout == 12.5
    assert config.allow_empty_symbol is True
    assert config.default_creator_share_to_signer is False
    assert config.allow_empty_creators is False
