"""Turn a finished MintAttempt into the structured outcome callers consume."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from errors import MintError
from mint_attempt import MintAttempt, MintState


@dataclass(frozen=True)
class MintOutcome:
    state: MintState
    mint_address: Optional[str] = None
    last_error: Optional[MintError] = None
    progress: MintState = MintState.VALIDATED
    signatures: Dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return self.state is MintState.FINALIZED

    @property
    def error_kind(self) -> Optional[str]:
        return self.last_error.kind.value if self.last_error else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "mint": self.mint_address,
            "progress": self.progress.value,
            "signatures": dict(self.signatures),
            "error": self.last_error.to_dict() if self.last_error else None,
        }


def report(attempt: MintAttempt) -> MintOutcome:
    return MintOutcome(
        state=attempt.state,
        mint_address=attempt.mint_address,
        last_error=attempt.last_error,
        progress=attempt.progress,
        signatures=dict(attempt.signatures),
    )
