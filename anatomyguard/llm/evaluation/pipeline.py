"""Evaluation pipeline orchestrator."""

from __future__ import annotations

import asyncio
import logging

from anatomyguard.model import EncodedDocument, EvaluationReport, ProcessingStatus, SourceDocument

from .assembler import ReportAssembler
from .encoder import DocumentEncoder
from .errors import EvaluationCancelled, EvaluationError, EvaluationInProgress, GatewayUnavailable
from .gateway import GenerationGateway
from .request import ReportRequestBuilder
from .validator import ResponseValidator

logger = logging.getLogger(__name__)


class EvaluationPipeline:
    """Produces an evaluation report from an artifact bundle and a feedback document.

    The pipeline:
    1. Encodes both documents (concurrently)
    2. Builds the generation request
    3. Calls the generation gateway
    4. Parses and validates the generated payload
    5. Audits the score locally and assembles the final report

    The pipeline holds no per-evaluation state and never retries; every
    failure is raised as an :class:`EvaluationError` for the caller to handle.
    """

    def __init__(
        self,
        gateway: GenerationGateway,
        builder: ReportRequestBuilder,
        encoder: DocumentEncoder,
        validator: ResponseValidator | None = None,
        assembler: ReportAssembler | None = None,
        timeout: float | None = None,
    ) -> None:
        """Initialize the pipeline.

        Args:
            gateway: Structured-completion capability
            builder: Builds the generation request from encoded documents
            encoder: Encodes and checks input documents
            validator: Parses generated payloads
            assembler: Merges generated output with the local audit
            timeout: Seconds to wait for the gateway before giving up
        """
        self.gateway = gateway
        self.builder = builder
        self.encoder = encoder
        self.validator = validator or ResponseValidator()
        self.assembler = assembler or ReportAssembler()
        self.timeout = timeout

    async def evaluate(self, artifact: SourceDocument, feedback: SourceDocument) -> EvaluationReport:
        encoded_artifact, encoded_feedback = await self.encoder.encode_pair(artifact, feedback)
        return await self.evaluate_encoded(encoded_artifact, encoded_feedback)

    async def evaluate_encoded(self, artifact: EncodedDocument, feedback: EncodedDocument) -> EvaluationReport:
        request = self.builder.build(artifact, feedback)

        logger.info(
            "requesting report generation",
            extra={
                "artifact": request.artifact.name,
                "feedback": request.feedback.name,
                "media_types": [d.media_type for d in request.documents],
            },
        )
        try:
            async with asyncio.timeout(self.timeout):
                text = await self.gateway.generate(request.text_parts, request.documents, request.schema)
        except TimeoutError as e:
            logger.error("report generation timed out", extra={"timeout": self.timeout})
            raise GatewayUnavailable(f"timed out after {self.timeout}s") from e
        logger.debug("received generated payload", extra={"length": len(text)})

        generated = self.validator.validate(text)
        report = self.assembler.assemble(generated)
        logger.info(
            "evaluation complete",
            extra={
                "exam_reference": report.exam_reference,
                "questions": len(report.question_wise_feedback),
                "status": report.score_verification.status.value,
            },
        )
        return report


class EvaluationSession(object):
    """Tracks a single evaluation at a time, as an interactive client does.

    ``reset`` abandons an in-flight run; since the pipeline never mutates a
    shared report, the abandoned run leaves nothing behind.
    """

    def __init__(self, pipeline: EvaluationPipeline):
        self.pipeline = pipeline
        self.status = ProcessingStatus.Idle
        self.report: EvaluationReport | None = None
        self.error: EvaluationError | None = None
        self._task: asyncio.Task[EvaluationReport] | None = None

    @property
    def busy(self) -> bool:
        return self._task is not None and not self._task.done()

    async def run(self, artifact: SourceDocument, feedback: SourceDocument) -> EvaluationReport:
        if self.busy:
            raise EvaluationInProgress()

        self.status = ProcessingStatus.Analyzing
        self.report = None
        self.error = None
        task = asyncio.create_task(self.pipeline.evaluate(artifact, feedback))
        self._task = task

        try:
            report = await task
        except asyncio.CancelledError:
            if self._task is not task:
                # abandoned by reset(); the caller itself was not cancelled
                raise EvaluationCancelled() from None
            task.cancel()
            self._task = None
            self.status = ProcessingStatus.Idle
            raise
        except EvaluationError as e:
            if self._task is task:
                self.status = ProcessingStatus.Error
                self.error = e
                self._task = None
            raise

        if self._task is not task:
            raise EvaluationCancelled()
        self.status = ProcessingStatus.Completed
        self.report = report
        self._task = None
        return report

    def reset(self) -> None:
        task, self._task = self._task, None
        if task is not None and not task.done():
            logger.info("cancelling in-flight evaluation")
            task.cancel()
        self.status = ProcessingStatus.Idle
        self.report = None
        self.error = None
