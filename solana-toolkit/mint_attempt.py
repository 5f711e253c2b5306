"""Mint attempt state machine."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from errors import MintError
from mint_request import MintSpec


class MintState(Enum):
    VALIDATED = "Validated"
    MINT_CREATED = "MintCreated"
    METADATA_ATTACHED = "MetadataAttached"
    FINALIZED = "Finalized"
    FAILED = "Failed"


class MintStep(Enum):
    CREATE_MINT = "create_mint"
    ATTACH_METADATA = "attach_metadata"
    FINALIZE = "finalize"


# Success path, in order; each step moves the attempt to the state after it.
PROGRESSION = [
    MintState.VALIDATED,
    MintState.MINT_CREATED,
    MintState.METADATA_ATTACHED,
    MintState.FINALIZED,
]
STEPS = [MintStep.CREATE_MINT, MintStep.ATTACH_METADATA, MintStep.FINALIZE]
STEP_RESULT = dict(zip(STEPS, PROGRESSION[1:]))


@dataclass
class MintAttempt:
    """One run of the orchestrator. Never reused: a retry is a new attempt."""

    spec: MintSpec
    state: MintState = MintState.VALIDATED
    mint_address: Optional[str] = None
    last_error: Optional[MintError] = None
    signatures: Dict[str, str] = field(default_factory=dict)
    history: List[MintState] = field(init=False)

    def __post_init__(self):
        if self.state is MintState.FAILED:
            raise ValueError("an attempt cannot start in the Failed state")
        if self.state is not MintState.VALIDATED and self.mint_address is None:
            raise ValueError(f"an attempt starting at {self.state.value} needs a mint address")
        self.history = [self.state]

    @property
    def terminal(self) -> bool:
        return self.state in (MintState.FINALIZED, MintState.FAILED)

    @property
    def progress(self) -> MintState:
        """Furthest success-path state reached."""
        return [s for s in self.history if s is not MintState.FAILED][-1]

    def next_step(self) -> Optional[MintStep]:
        if self.terminal:
            return None
        return STEPS[PROGRESSION.index(self.state)]

    def _move(self, state: MintState) -> None:
        if self.terminal:
            raise RuntimeError(f"attempt already terminal in {self.state.value}")
        if state is not MintState.FAILED and PROGRESSION.index(state) != PROGRESSION.index(self.state) + 1:
            raise RuntimeError(f"illegal transition {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def record_mint(self, mint_address: str) -> None:
        if self.mint_address is not None:
            raise RuntimeError(f"mint address already set to {self.mint_address}")
        self.mint_address = mint_address

    def complete(self, step: MintStep, signature: Optional[str]) -> None:
        if step is not self.next_step():
            raise RuntimeError(f"{step.value} is not the next step from {self.state.value}")
        if signature:
            self.signatures[step.value] = signature
        self._move(STEP_RESULT[step])

    def fail(self, error: MintError) -> None:
        self.last_error = error
        self._move(MintState.FAILED)
