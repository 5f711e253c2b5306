import json

from errors import PartialMint, TransientNetworkError
from mint_attempt import MintAttempt, MintState, MintStep
from mint_reporter import report
from mint_request import build_mint_spec
from settings import MintConfig


def test_report_partial_mint(params, wallet):
    attempt = MintAttempt(build_mint_spec(params, wallet.public_address(), MintConfig()))
    attempt.record_mint("MintAddr")
    attempt.complete(MintStep.CREATE_MINT, "sig1")
    attempt.fail(PartialMint("MintAddr", "attach_metadata", TransientNetworkError("timeout")))

    outcome = report(attempt)
    assert not outcome.ok
    assert outcome.state is MintState.FAILED
    assert outcome.progress is MintState.MINT_CREATED
    assert outcome.mint_address == "MintAddr"
    assert outcome.error_kind == "PartialMint"

    data = json.loads(json.dumps(outcome.to_dict()))
    assert data["state"] == "Failed"
    assert data["mint"] == "MintAddr"
    assert data["signatures"] == {"create_mint": "sig1"}
    assert data["error"]["failed_at_step"] == "attach_metadata"
    assert data["error"]["cause"]["kind"] == "TransientNetworkError"


def test_report_is_a_snapshot(params, wallet):
    attempt = MintAttempt(build_mint_spec(params, wallet.public_address(), MintConfig()))
    outcome = report(attempt)
    attempt.record_mint("X")
    attempt.complete(MintStep.CREATE_MINT, "sig")
    assert outcome.state is MintState.VALIDATED
    assert outcome.mint_address is None
    assert outcome.signatures == {}
    assert outcome.to_dict()["error"] is None
