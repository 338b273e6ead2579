# Name: analysis_service.py
# Description: Analysis orchestrator combining LLM assessment with regex heuristics
# Date: 2026-10-12

import logging
import time
from datetime import datetime, timezone
from typing import Optional

from cybersentry.core.config import DEFAULT_MAX_PROMPT_CHARS
from cybersentry.core.errors import ValidationError, LLMError
from cybersentry.models.analysis import AnalysisResponse, ParsedReport
from cybersentry.services.gemini_service import LLMClient
from cybersentry.services.heuristics import (
    detect_phishing_indicators,
    detect_log_anomalies,
    first_non_blank_lines,
)
from cybersentry.services.parser import parse_llm_response
from cybersentry.services.prompts import (
    build_phishing_prompt,
    build_logs_prompt,
    build_explain_line_prompt,
)
from cybersentry.services.scoring import determine_risk_level

# Configure logging
logger = logging.getLogger(__name__)


# =============================================================================
# FALLBACKS
# =============================================================================

DEFAULT_PHISHING_RECS = [
    "Verify sender through alternative communication method",
    "Do not click on suspicious links",
    "Report suspicious emails to your IT security team",
]

DEFAULT_LOG_RECS = [
    "Monitor authentication logs for patterns",
    "Review access patterns and IP addresses",
    "Implement additional monitoring for detected anomalies",
]

DEFAULT_PHISHING_SUMMARY = "Email phishing analysis completed"
DEFAULT_LOG_SUMMARY = "Security log analysis completed"

# Number of log lines echoed back to the client
LOG_PREVIEW_LINES = 20


def utc_timestamp() -> str:
    """Current UTC instant in ISO-8601 form with a 'Z' suffix."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


# =============================================================================
# ORCHESTRATOR
# =============================================================================

class AnalysisOrchestrator:
    """
    Runs one analysis flow against a single LLM client.
    
    Every flow follows the same pipeline: build a prompt from truncated
    input, call the LLM, parse its reply, run heuristics over the full
    original input, then assemble the response envelope.
    """
    
    def __init__(self, client: LLMClient, max_prompt_chars: int = DEFAULT_MAX_PROMPT_CHARS):
        self.client = client
        self.max_prompt_chars = max_prompt_chars
    
    async def _assess(self, prompt: str) -> tuple[str, ParsedReport]:
        """Call the LLM and parse its reply."""
        llm_start = time.perf_counter()
        raw = await self.client.generate(prompt)
        parsed = parse_llm_response(raw)
        
        llm_elapsed = (time.perf_counter() - llm_start) * 1000
        logger.debug(
            f"[Orchestrator] LLM reply parsed score={parsed.risk_score} "
            f"recommendations={len(parsed.recommendations)} ({llm_elapsed:.0f}ms)"
        )
        return raw, parsed
    
    async def analyze_phishing(self, email_content: Optional[str], include_headers: bool = False) -> AnalysisResponse:
        """
        Score an email for phishing.
        
        Args:
            email_content: Raw email text
            include_headers: Whether the text carries a header block
            
        Returns:
            AnalysisResponse with heuristic indicators
            
        Raises:
            ValidationError: Empty email content
            LLMError: The LLM call failed
        """
        if not email_content:
            raise ValidationError("Email content is required")
        
        prompt = build_phishing_prompt(email_content, include_headers, self.max_prompt_chars)
        raw, parsed = await self._assess(prompt)
        
        # Indicators depend on the LLM's score, so they run after the call
        indicators = detect_phishing_indicators(email_content, parsed.risk_score)
        
        return AnalysisResponse(
            analysis_type="phishing_email",
            risk_score=parsed.risk_score,
            risk_level=determine_risk_level(parsed.risk_score),
            summary=parsed.summary or DEFAULT_PHISHING_SUMMARY,
            detailed_analysis=parsed.detailed_analysis or raw,
            indicators=indicators,
            recommendations=parsed.recommendations or list(DEFAULT_PHISHING_RECS),
            analysis_timestamp=utc_timestamp(),
        )
    
    async def analyze_logs(self, log_content: Optional[str], filename: Optional[str] = None) -> AnalysisResponse:
        """
        Score a security log.
        
        Args:
            log_content: Log text
            filename: Original file name (prompt default: system.log)
            
        Returns:
            AnalysisResponse with heuristic anomalies and a log preview
            
        Raises:
            ValidationError: Empty log content
            LLMError: The LLM call failed
        """
        if not log_content:
            raise ValidationError("Log content is required")
        
        prompt = build_logs_prompt(log_content, filename, self.max_prompt_chars)
        raw, parsed = await self._assess(prompt)
        
        anomalies = detect_log_anomalies(log_content)
        
        return AnalysisResponse(
            analysis_type="security_logs",
            risk_score=parsed.risk_score,
            risk_level=determine_risk_level(parsed.risk_score),
            summary=parsed.summary or DEFAULT_LOG_SUMMARY,
            detailed_analysis=parsed.detailed_analysis or raw,
            anomalies=anomalies,
            log_lines=first_non_blank_lines(log_content, LOG_PREVIEW_LINES),
            recommendations=parsed.recommendations or list(DEFAULT_LOG_RECS),
            analysis_timestamp=utc_timestamp(),
        )
    
    async def explain_log_line(self, log_line: Optional[str]) -> str:
        """
        Explain one log line in plain language.
        
        LLM failures are not fatal here: the error is folded into the
        returned text instead of being raised.
        
        Raises:
            ValidationError: Empty log line
        """
        if not log_line:
            raise ValidationError("Log line is required")
        
        prompt = build_explain_line_prompt(log_line, self.max_prompt_chars)
        try:
            explanation = await self.client.generate(prompt)
        except LLMError as e:
            logger.warning(f"[Orchestrator] Log line explanation failed: {e.message}")
            return f"Unable to explain log line: {e.message}"
        
        return explanation.strip()
