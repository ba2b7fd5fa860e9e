"""Job layer package for workflow orchestration boundaries."""

from .interfaces import JobExecutionResult, JobOrchestratorPort
from .conversion_orchestrator import ConversionJobOrchestrator, ConversionOrchestratorConfig, ConversionResult

__all__ = [
	"JobExecutionResult",
	"JobOrchestratorPort",
	"ConversionJobOrchestrator",
	"ConversionOrchestratorConfig",
	"ConversionResult",
]
