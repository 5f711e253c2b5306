"""Error taxonomy for NFT minting.

Validation errors are raised before any network call. Everything else is
carried back to the caller inside a MintOutcome.
"""

from enum import Enum
from typing import Optional, Sequence


class ErrorKind(Enum):
    VALIDATION = "Validation"
    TRANSIENT_NETWORK = "TransientNetworkError"
    STEP_REJECTED = "StepRejected"
    PARTIAL_MINT = "PartialMint"
    CANCELLED = "Cancelled"
    UNEXPECTED = "UnexpectedError"


class ValidationReason(Enum):
    FEE_OUT_OF_RANGE = "FeeOutOfRange"
    EMPTY_CREATOR_LIST = "EmptyCreatorList"
    TOO_MANY_CREATORS = "TooManyCreators"
    SHARE_OUT_OF_RANGE = "ShareOutOfRange"
    SHARES_DO_NOT_SUM_TO_100 = "SharesDoNotSumTo100"
    DUPLICATE_CREATOR_ADDRESS = "DuplicateCreatorAddress"
    INVALID_CREATOR_ADDRESS = "InvalidCreatorAddress"
    EMPTY_SYMBOL = "EmptySymbol"
    SYMBOL_TOO_LONG = "SymbolTooLong"
    NAME_TOO_LONG = "NameTooLong"
    URI_TOO_LONG = "UriTooLong"
    MINT_AUTHORITY_MISMATCH = "MintAuthorityMismatch"


class MintError(Exception):
    """Base class for every minting failure."""

    kind: ErrorKind

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "message": str(self)}


class ValidationError(MintError, ValueError):
    kind = ErrorKind.VALIDATION

    def __init__(self, reason: ValidationReason, message: str):
        super().__init__(message)
        self.reason = reason

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["reason"] = self.reason.value
        return data


class TransientNetworkError(MintError):
    """Broadcast, confirmation timeout or RPC connectivity failure."""

    kind = ErrorKind.TRANSIENT_NETWORK

    def __init__(
        self,
        message: str,
        step: Optional[str] = None,
        signature: Optional[str] = None,
        signatures: Sequence[str] = (),
        mint_address: Optional[str] = None,
    ):
        super().__init__(message)
        self.step = step
        self.signature = signature
        # every submission of the step; any of them may still land
        self.signatures = list(signatures) or ([signature] if signature else [])
        # set when create_mint gave up: the account at this address may exist
        self.mint_address = mint_address

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"step": self.step, "signatures": self.signatures})
        if self.mint_address is not None:
            data["mint_address"] = self.mint_address
        return data


class StepRejected(MintError):
    """The ledger confirmed the transaction failed. Never retried."""

    kind = ErrorKind.STEP_REJECTED

    def __init__(self, step: str, reason: str, signature: Optional[str] = None):
        super().__init__(f"{step} rejected: {reason}")
        self.step = step
        self.reason = reason
        self.signature = signature

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({"step": self.step, "reason": self.reason})
        return data


class UnexpectedStepError(MintError):
    """A step raised something outside the MintError taxonomy."""

    kind = ErrorKind.UNEXPECTED

    def __init__(self, step: str, error: Exception):
        super().__init__(f"{step} failed unexpectedly: {error!r}")
        self.step = step
        self.error = error


class MintCancelled(MintError):
    kind = ErrorKind.CANCELLED

    def __init__(self, step: str):
        super().__init__(f"cancelled before {step}")
        self.step = step


class PartialMint(MintError):
    """The mint account exists on chain but a later step did not complete."""

    kind = ErrorKind.PARTIAL_MINT

    def __init__(self, mint_address: str, failed_at_step: str, cause: MintError):
        super().__init__(f"mint {mint_address} created but {failed_at_step} failed: {cause}")
        self.mint_address = mint_address
        self.failed_at_step = failed_at_step
        self.cause = cause

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            "mint_address": self.mint_address,
            "failed_at_step": self.failed_at_step,
            "cause": self.cause.to_dict(),
        })
        return data
