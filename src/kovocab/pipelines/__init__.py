"""Enrichment pipelines: ingest, lemmatize, define, audit, correct, translate."""

from kovocab.pipelines.audit import AuditStatus, Pass, audit_status, check_transition
from kovocab.pipelines.driver import PipelineDriver, PipelineRunResult
from kovocab.pipelines.operations import (
    AuditEntries,
    BatchOperation,
    CorrectEntries,
    GenerateDefinitions,
    TranslateEntries,
)
from kovocab.pipelines.validation import ParsedResponse, ResponseValidator

__all__ = [
    "AuditEntries",
    "AuditStatus",
    "BatchOperation",
    "CorrectEntries",
    "GenerateDefinitions",
    "ParsedResponse",
    "Pass",
    "PipelineDriver",
    "PipelineRunResult",
    "ResponseValidator",
    "TranslateEntries",
    "audit_status",
    "check_transition",
]
