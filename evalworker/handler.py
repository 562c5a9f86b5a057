"""
Job handler for the automated-evaluation task.

Each invocation draws one confidence score and returns the completion
payload; pyzeebe completes the job with the returned variables.
"""

from typing import Any, Awaitable, Callable, Dict

from pyzeebe import Job, JobController, default_exception_handler

from .logger import StructuredLogger
from .schema import SCORE_FIELD, validate_completion_payload
from .scoring import Scorer

JobHandler = Callable[[Job], Awaitable[Dict[str, Any]]]


class InvalidPayloadError(ValueError):
    """Raised when a completion payload fails validation."""

    def __init__(self, errors):
        self.errors = list(errors)
        super().__init__("Invalid completion payload: " + "; ".join(self.errors))


def build_payload(score: float) -> Dict[str, Any]:
    """Wrap *score* in the single-variable completion payload."""
    if isinstance(score, int) and not isinstance(score, bool):
        score = float(score)
    payload = {SCORE_FIELD: score}
    errors = validate_completion_payload(payload)
    if errors:
        raise InvalidPayloadError(errors)
    return payload


def make_evaluation_handler(scorer: Scorer, logger: StructuredLogger) -> JobHandler:
    """
    Build the callback registered for the evaluation task type.

    Args:
        scorer: Zero-argument callable producing the confidence score
        logger: Logger receiving progress messages and job metrics

    Returns:
        Async function taking a pyzeebe Job and returning its output variables
    """

    async def evaluate(job: Job) -> Dict[str, Any]:
        logger.record_job_received(job.type)
        logger.info("Processing job", job_key=job.key, task_type=job.type)

        confidence_score = scorer()
        logger.info("Calculated confidenceScore", job_key=job.key, confidence_score=confidence_score)

        payload = build_payload(confidence_score)

        logger.record_job_completed(job.type, payload[SCORE_FIELD])
        logger.info("Job completed", job_key=job.key)
        return payload

    return evaluate


def make_exception_handler(logger: StructuredLogger):
    """Exception handler that logs the failure before pyzeebe fails the job."""

    async def on_error(exception: Exception, job: Job, job_controller: JobController) -> None:
        error_type = type(exception).__name__
        logger.record_job_failed(job.type, error_type)
        logger.error(
            "Job failed",
            job_key=job.key,
            task_type=job.type,
            error_type=error_type,
            error=str(exception),
        )
        await default_exception_handler(exception, job, job_controller)

    return on_error
