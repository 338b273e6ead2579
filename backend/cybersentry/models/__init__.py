# Name: __init__.py
# Description: Export all models for convenient importing

from cybersentry.models.analysis import (
    RiskLevel,
    AnalysisType,
    SetKeyRequest,
    PhishingRequest,
    LogsRequest,
    ExplainLineRequest,
    Finding,
    ParsedReport,
    AnalysisResponse,
    ExplanationResponse,
    MessageResponse,
)

__all__ = [
    "RiskLevel",
    "AnalysisType",
    "SetKeyRequest",
    "PhishingRequest",
    "LogsRequest",
    "ExplainLineRequest",
    "Finding",
    "ParsedReport",
    "AnalysisResponse",
    "ExplanationResponse",
    "MessageResponse",
]
