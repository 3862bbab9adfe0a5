from __future__ import annotations
import asyncio
import logging
import threading
import uuid
from typing import Optional

from .agents.inference import InferenceClient
from .agents.prompt_builder import PromptBuilder
from .agents.response_validator import AnalysisResult, ResponseValidator
from .errors import ConcurrentSubmissionError, ErrorKind, PreconditionError, ValidationError
from .graph.workflow import build_graph
from .state import AnalysisOutcome, Document, Phase, PipelineState
from .utils import DocumentTextExtractor

logger = logging.getLogger(__name__)


class AnalysisOrchestrator:
    """Runs one resume analysis at a time and tracks its phase.

    Guard failures (no document, no role text, a run already in flight) raise
    PreconditionError without touching the phase. Pipeline failures end the run
    in ``Phase.FAILED`` and come back inside the returned AnalysisOutcome.
    """

    def __init__(
        self,
        extractor: Optional[DocumentTextExtractor] = None,
        prompt_builder: Optional[PromptBuilder] = None,
        inference_client: Optional[InferenceClient] = None,
        validator: Optional[ResponseValidator] = None,
    ):
        self._lock = threading.Lock()
        self._phase = Phase.IDLE
        self._run_id: Optional[str] = None
        self._outcome: Optional[AnalysisOutcome] = None
        self._run_graph = build_graph(
            extractor or DocumentTextExtractor(),
            prompt_builder or PromptBuilder(),
            inference_client or InferenceClient(),
            validator or ResponseValidator(),
            self._on_phase,
        )

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def run_id(self) -> Optional[str]:
        return self._run_id

    @property
    def outcome(self) -> Optional[AnalysisOutcome]:
        return self._outcome

    @property
    def result(self) -> Optional[AnalysisResult]:
        return self._outcome.result if self._outcome is not None else None

    @property
    def error_kind(self) -> Optional[ErrorKind]:
        return self._outcome.error_kind if self._outcome is not None else None

    @property
    def busy(self) -> bool:
        return self._phase is not Phase.IDLE and not self._phase.terminal

    def _on_phase(self, run_id: str, phase: Phase) -> None:
        with self._lock:
            if run_id != self._run_id:
                logger.debug("Ignoring phase %s from stale run %s", phase.value, run_id)
                return
            logger.debug("Run %s -> %s", run_id, phase.value)
            self._phase = phase

    def _start(self, document: Optional[Document], role_title: str, role_description: str) -> str:
        if document is None:
            raise PreconditionError("A resume document is required.")
        if not (role_title or "").strip() and not (role_description or "").strip():
            raise PreconditionError("Enter a target role title or a role description.")
        with self._lock:
            if self.busy:
                logger.info("Rejected submission: run %s is still %s", self._run_id, self._phase.value)
                raise ConcurrentSubmissionError("An analysis is already in progress.")
            run_id = uuid.uuid4().hex
            self._run_id = run_id
            self._outcome = None
            self._phase = Phase.EXTRACTING
        logger.info("Run %s started (%s)", run_id, document.media_type)
        return run_id

    def _reset_if_current(self, run_id: str) -> None:
        with self._lock:
            if self._run_id == run_id:
                self._phase = Phase.IDLE
                self._run_id = None

    def abandon(self) -> None:
        """Forget the in-flight run; whatever it produces later is discarded."""
        with self._lock:
            if self.busy:
                logger.info("Run %s abandoned in phase %s", self._run_id, self._phase.value)
                self._phase = Phase.IDLE
                self._run_id = None

    async def submit_analysis(
        self,
        document: Optional[Document],
        role_title: str = "",
        role_description: str = "",
    ) -> AnalysisOutcome:
        run_id = self._start(document, role_title, role_description)
        state = PipelineState(
            run_id=run_id,
            document=document,
            role_title=role_title or "",
            role_description=role_description or "",
        )
        try:
            final = await self._run_graph(state)
        except asyncio.CancelledError:
            self._reset_if_current(run_id)
            raise
        except Exception:
            logger.exception("Run %s crashed", run_id)
            self._reset_if_current(run_id)
            raise

        warnings = []
        low_confidence = final.extracted is not None and final.extracted.low_confidence
        if low_confidence:
            warnings.append("No text could be extracted from the document; the assessment may be unreliable.")

        if final.error is None and final.result is not None:
            outcome = AnalysisOutcome(
                run_id=run_id,
                phase=Phase.SUCCEEDED,
                result=final.result,
                low_confidence=low_confidence,
                warnings=warnings,
            )
        else:
            outcome = AnalysisOutcome(
                run_id=run_id,
                phase=Phase.FAILED,
                error=final.error or ValidationError("no result produced"),
                low_confidence=low_confidence,
                warnings=warnings,
            )

        with self._lock:
            if self._run_id != run_id:
                logger.info("Discarding result of stale run %s", run_id)
                return outcome
            self._phase = outcome.phase
            self._outcome = outcome

        if outcome.succeeded:
            logger.info("Run %s succeeded (score=%s)", run_id, outcome.result.score)
        else:
            logger.warning("Run %s failed: %s", run_id, outcome.error)
        return outcome
