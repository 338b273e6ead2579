# Name: analysis.py
# Description: Pydantic models for the analysis API
# Date: 2026-10-12

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


RiskLevel = Literal["LOW", "MEDIUM", "HIGH", "CRITICAL"]
AnalysisType = Literal["phishing_email", "security_logs"]


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# REQUESTS
# =============================================================================

class SetKeyRequest(CamelModel):
    """
    Request payload for configuring the Gemini API key.
    
    Attributes:
        api_key: Third-party Gemini API key
    """
    api_key: Optional[str] = None


class PhishingRequest(CamelModel):
    """
    Request payload for phishing email analysis.
    
    Attributes:
        email_content: Raw email text (optionally with headers)
        include_headers: Whether the content carries a header block
        api_key: Optional request-scoped key that overrides the configured one
    """
    email_content: Optional[str] = None
    include_headers: bool = False
    api_key: Optional[str] = None


class LogsRequest(CamelModel):
    """
    Request payload for security log analysis (JSON form).
    
    Attributes:
        log_content: Log file text
        filename: Original file name, used in the prompt
        api_key: Optional request-scoped key that overrides the configured one
    """
    log_content: Optional[str] = None
    filename: Optional[str] = None
    api_key: Optional[str] = None


class ExplainLineRequest(CamelModel):
    """Request payload for explaining a single log line."""
    log_line: Optional[str] = None
    api_key: Optional[str] = None


# =============================================================================
# ANALYSIS RESULTS
# =============================================================================

class Finding(CamelModel):
    """
    A heuristic finding, used for both phishing indicators and log anomalies.
    
    Attributes:
        type: Finding label (e.g., 'Urgency Tactics', 'High Error Rate')
        description: Human-readable description of the finding
        severity: Severity band
    """
    type: str
    description: str
    severity: RiskLevel


class ParsedReport(CamelModel):
    """
    Structured view of the LLM's free-text reply.
    
    Attributes:
        risk_score: Score clamped to 1-10 (5 when the reply has none)
        summary: Summary section text, possibly empty
        detailed_analysis: Detailed analysis section text, possibly empty
        recommendations: Bullet items from the recommendations section
    """
    risk_score: int = 5
    summary: str = ""
    detailed_analysis: str = ""
    recommendations: list[str] = Field(default_factory=list)


class AnalysisResponse(CamelModel):
    """
    Response payload from phishing or log analysis.
    
    Attributes:
        analysis_type: 'phishing_email' or 'security_logs'
        risk_score: Numeric risk score (1 - 10)
        risk_level: Band derived from risk_score
        summary: Short overview of the findings
        detailed_analysis: Longer explanation (raw LLM text as a fallback)
        indicators: Heuristic phishing indicators (phishing flow only)
        anomalies: Heuristic log anomalies (logs flow only)
        log_lines: First non-blank lines of the log (logs flow only)
        recommendations: Never-empty list of suggested actions
        analysis_timestamp: ISO-8601 UTC instant the response was assembled
    """
    analysis_type: AnalysisType
    risk_score: int = Field(..., ge=1, le=10)
    risk_level: RiskLevel
    summary: str
    detailed_analysis: str
    indicators: Optional[list[Finding]] = None
    anomalies: Optional[list[Finding]] = None
    log_lines: Optional[list[str]] = None
    recommendations: list[str] = Field(..., min_length=1)
    analysis_timestamp: str


class ExplanationResponse(CamelModel):
    """Plain-language explanation of a log line."""
    explanation: str


class MessageResponse(CamelModel):
    """Simple acknowledgement body."""
    message: str
