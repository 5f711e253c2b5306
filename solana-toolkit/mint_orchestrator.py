"""Drive the three on-chain steps of an NFT mint.

Steps:
1. create_mint: allocate a 0-decimal mint and mint 1 token to the signer
2. attach_metadata: Metaplex metadata account (name, symbol, uri, royalties, creators)
3. finalize: Metaplex master edition, which locks the supply at one

Each step is its own transaction. Nothing on chain can be rolled back, so
once the mint exists its address is always reported, even on failure.
"""

import logging
import threading
import time
from typing import Callable, List, Optional

from solders.keypair import Keypair
from solders.pubkey import Pubkey

from errors import (
    MintCancelled, MintError, PartialMint, StepRejected,
    TransientNetworkError, UnexpectedStepError, ValidationError, ValidationReason,
)
from ledger import LedgerConnection, TransactionResult, UnsignedTransaction
from metadata_program import create_master_edition_v3_ix, create_metadata_account_v3_ix
from mint_attempt import MintAttempt, MintState, MintStep
from mint_reporter import MintOutcome, report
from mint_request import MintSpec
from settings import MintConfig
from token_instructions import MINT_ACCOUNT_SIZE, create_nft_mint_ixs
from wallet import Signer

logger = logging.getLogger(__name__)

RESUMABLE_STATES = (MintState.MINT_CREATED, MintState.METADATA_ATTACHED)


class MintOrchestrator:
    """Run mint attempts against a ledger with a signer.

    Holds no per-attempt state, so one orchestrator can serve concurrent
    mints as long as the connection and signer can.
    """

    def __init__(
        self,
        connection: LedgerConnection,
        signer: Signer,
        config: Optional[MintConfig] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.connection = connection
        self.signer = signer
        self.config = config or MintConfig()
        self._sleep = sleep

    def mint(
        self,
        spec: MintSpec,
        cancel_event: Optional[threading.Event] = None,
        mint_keypair: Optional[Keypair] = None,
    ) -> MintOutcome:
        """Mint a new NFT described by `spec`.

        Args:
            spec: Validated MintSpec.
            cancel_event: Checked between steps; a step in flight always finishes.
            mint_keypair: Keypair for the new mint account. Generated if None.

        Returns:
            MintOutcome: Finalized on success; Failed with the error otherwise.

        Raises:
            ValidationError: If spec.mint_authority is not the signer.
        """
        self._check_authority(spec)
        attempt = MintAttempt(spec)
        return self._run(attempt, mint_keypair or Keypair(), cancel_event)

    def resume(
        self,
        spec: MintSpec,
        mint_address: str,
        completed: MintState = MintState.MINT_CREATED,
        cancel_event: Optional[threading.Event] = None,
    ) -> MintOutcome:
        """Finish a partial mint whose steps up to `completed` already landed.

        Raises:
            ValidationError: If spec.mint_authority is not the signer.
            ValueError: If `completed` is not resumable or the address is malformed.
        """
        self._check_authority(spec)
        if completed not in RESUMABLE_STATES:
            raise ValueError(f"cannot resume from {completed.value}")
        Pubkey.from_string(mint_address)
        attempt = MintAttempt(spec, state=completed, mint_address=mint_address)
        logger.info("Resuming mint %s from %s", mint_address, completed.value)
        return self._run(attempt, None, cancel_event)

    def _check_authority(self, spec: MintSpec) -> None:
        signer_address = self.signer.public_address()
        if spec.mint_authority != signer_address:
            raise ValidationError(
                ValidationReason.MINT_AUTHORITY_MISMATCH,
                f"spec mint authority {spec.mint_authority} is not the signer {signer_address}",
            )

    def _run(
        self,
        attempt: MintAttempt,
        mint_keypair: Optional[Keypair],
        cancel_event: Optional[threading.Event],
    ) -> MintOutcome:
        while not attempt.terminal:
            step = attempt.next_step()
            if cancel_event is not None and cancel_event.is_set():
                self._fail(attempt, step, MintCancelled(step.value))
                break
            try:
                signature = self._run_step(attempt, step, mint_keypair)
            except MintError as e:
                self._fail(attempt, step, e)
                break
            except Exception as e:
                if attempt.mint_address is None:
                    raise
                logger.exception("%s raised for mint %s", step.value, attempt.mint_address)
                self._fail(attempt, step, UnexpectedStepError(step.value, e))
                break
            attempt.complete(step, signature)
            logger.info("%s confirmed for mint %s (tx: %s)", step.value, attempt.mint_address, signature)
        return report(attempt)

    def _fail(self, attempt: MintAttempt, step: MintStep, error: MintError) -> None:
        if attempt.mint_address is not None:
            error = PartialMint(attempt.mint_address, step.value, error)
        logger.error("Mint failed at %s: %s", step.value, error)
        attempt.fail(error)

    def _run_step(self, attempt: MintAttempt, step: MintStep, mint_keypair: Optional[Keypair]) -> Optional[str]:
        payer = Pubkey.from_string(self.signer.public_address())
        spec = attempt.spec

        if step is MintStep.CREATE_MINT:
            mint = mint_keypair.pubkey()

            def build() -> UnsignedTransaction:
                rent = self.connection.minimum_rent(MINT_ACCOUNT_SIZE)
                return UnsignedTransaction(
                    tuple(create_nft_mint_ixs(payer, mint, rent)),
                    self.connection.latest_blockhash(),
                    (mint_keypair,),
                )

            try:
                result = self._submit_with_retry(step, build)
            except TransientNetworkError as e:
                # a timed-out submission may still create the account
                if e.signatures:
                    e.mint_address = str(mint)
                raise
            attempt.record_mint(str(mint))
            return result.signature

        mint = Pubkey.from_string(attempt.mint_address)
        if step is MintStep.ATTACH_METADATA:
            ix = create_metadata_account_v3_ix(
                mint,
                payer,
                name=spec.name,
                symbol=spec.symbol,
                uri=spec.metadata_uri,
                seller_fee_basis_points=spec.seller_fee_basis_points,
                creators=spec.creators,
                is_mutable=spec.is_mutable,
            )
        else:
            ix = create_master_edition_v3_ix(mint, payer, max_supply=0)

        def build() -> UnsignedTransaction:
            return UnsignedTransaction((ix,), self.connection.latest_blockhash())

        return self._submit_with_retry(step, build).signature

    def _submit_with_retry(self, step: MintStep, build: Callable[[], UnsignedTransaction]) -> TransactionResult:
        """Submit one step, retrying transient failures with exponential backoff.

        Every earlier submission of the step is checked for late confirmation
        before it is sent again, and after a rejection.

        Raises:
            StepRejected: The ledger rejected the transaction.
            TransientNetworkError: All tries failed transiently. Carries every
                signature that was submitted.
        """
        tries = self.config.max_retries + 1
        submitted: List[str] = []
        last_error: Optional[TransientNetworkError] = None

        for n in range(tries):
            if n:
                delay = self.config.backoff(n)
                logger.warning(
                    "%s: retry %d/%d in %.1fs after: %s",
                    step.value, n, self.config.max_retries, delay, last_error,
                )
                self._sleep(delay)
            try:
                late = self._late_confirmation(step, submitted)
                if late is not None:
                    return late
                result = self.connection.submit(self.signer.sign(build()), timeout=self.config.step_timeout)
            except TransientNetworkError as e:
                last_error = e
                if e.signature and e.signature not in submitted:
                    submitted.append(e.signature)
                continue

            if result.confirmed:
                return result
            if result.rejected:
                try:
                    late = self._late_confirmation(step, submitted)
                except TransientNetworkError as e:
                    logger.warning("%s: could not recheck earlier submissions after rejection: %s", step.value, e)
                    late = None
                if late is not None:
                    return late
                raise StepRejected(step.value, result.error or "unknown error", result.signature)

            if result.signature and result.signature not in submitted:
                submitted.append(result.signature)
            last_error = TransientNetworkError(
                f"{step.value} not confirmed within {self.config.step_timeout}s",
                step=step.value,
                signature=result.signature,
            )

        raise TransientNetworkError(
            f"{step.value} failed after {tries} tries: {last_error}",
            step=step.value,
            signature=submitted[-1] if submitted else None,
            signatures=submitted,
        )

    def _late_confirmation(self, step: MintStep, submitted: List[str]) -> Optional[TransactionResult]:
        # A resubmission can be rejected because an earlier one already landed.
        for signature in submitted:
            late = self.connection.status(signature)
            if late.confirmed:
                logger.info("%s: earlier submission %s confirmed late", step.value, signature)
                return late
        return None
