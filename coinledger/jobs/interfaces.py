"""Typed interfaces for job-layer orchestration responsibilities."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True)
class JobExecutionResult:
    """Result contract for batch workflow execution.

    Attributes:
        job_name: Job identifier.
        status: Final execution state (`success` or `failed`).
        error_code: Machine-readable failure code for failed runs.
        detail: Operator-facing failure description for failed runs.
    """

    job_name: str
    status: str
    error_code: str | None = None
    detail: str | None = None


class JobOrchestratorPort(Protocol):
    """Port definition for orchestrating conversion jobs."""

    def job_supported_names(self) -> tuple[str, ...]:
        """Return the set of workflow names this orchestrator can execute.

        Returns:
            tuple[str, ...]: Deterministic list of supported job names.

        Raises:
            RuntimeError: Raised when supported job metadata is unavailable.
        """

    def job_execute(self, job_name: str) -> JobExecutionResult:
        """Execute one named workflow in the job layer.

        Args:
            job_name: Workflow name.

        Returns:
            JobExecutionResult: Final execution status payload.

        Raises:
            ValueError: Raised when the job name is unsupported.
        """
