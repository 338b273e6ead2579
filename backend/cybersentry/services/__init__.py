# Name: __init__.py
# Description: Export all services for convenient importing
# Date: 2026-10-12

from cybersentry.services.analysis_service import (
    AnalysisOrchestrator,
    DEFAULT_PHISHING_RECS,
    DEFAULT_LOG_RECS,
)
from cybersentry.services.scoring import clamp_score, determine_risk_level
from cybersentry.services.parser import parse_llm_response
from cybersentry.services.heuristics import (
    detect_phishing_indicators,
    detect_log_anomalies,
    first_non_blank_lines,
)
from cybersentry.services.prompts import (
    build_phishing_prompt,
    build_logs_prompt,
    build_explain_line_prompt,
    render_skeleton,
)
from cybersentry.services.gemini_service import GeminiClient, ClientSlot, LLMClient

__all__ = [
    # Orchestration
    "AnalysisOrchestrator",
    "DEFAULT_PHISHING_RECS",
    "DEFAULT_LOG_RECS",
    # Scoring
    "clamp_score",
    "determine_risk_level",
    # Parsing
    "parse_llm_response",
    # Heuristics
    "detect_phishing_indicators",
    "detect_log_anomalies",
    "first_non_blank_lines",
    # Prompts
    "build_phishing_prompt",
    "build_logs_prompt",
    "build_explain_line_prompt",
    "render_skeleton",
    # Gemini AI
    "GeminiClient",
    "ClientSlot",
    "LLMClient",
]
