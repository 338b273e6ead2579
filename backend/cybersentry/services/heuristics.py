# Name: heuristics.py
# Description: Regex heuristics over the original user input, independent of the LLM text
# Date: 2026-10-12

import re
from typing import Optional

from cybersentry.models.analysis import Finding


# =============================================================================
# PHISHING PATTERNS
# =============================================================================

URGENCY_PATTERN = re.compile(r'urgent|immediate|expire|suspend|verify now', re.IGNORECASE)
SUSPICIOUS_LINK_PATTERN = re.compile(r'click here|verify account|update payment', re.IGNORECASE)
CAPS_RUN_PATTERN = re.compile(r'\b[A-Z]{2,}\b', re.ASCII)

# Score bands that gate the phishing checks
HIGH_RISK_SCORE = 6
MEDIUM_RISK_SCORE = 3


# =============================================================================
# LOG PATTERNS
# =============================================================================

AUTH_FAILURE_PATTERN = re.compile(r'failed|failure|invalid|denied', re.IGNORECASE)
IPV4_PATTERN = re.compile(r'\b(?:\d{1,3}\.){3}\d{1,3}\b', re.ASCII)
ERROR_PATTERN = re.compile(r'error|exception|critical|alert', re.IGNORECASE)

AUTH_FAILURE_THRESHOLD = 5
AUTH_FAILURE_HIGH_THRESHOLD = 20
UNIQUE_IP_THRESHOLD = 10
ERROR_THRESHOLD = 10


# =============================================================================
# PHISHING INDICATORS
# =============================================================================

def detect_phishing_indicators(email_content: str, risk_score: int) -> list[Finding]:
    """
    Derive phishing indicators from the raw email, gated by the LLM's score.
    
    Scores above 6 look for urgency and call-to-action phrases; scores above
    3 (and up to 6) look for repeated all-caps words. Lower scores yield
    nothing.
    
    Args:
        email_content: Full, untruncated email text
        risk_score: Score parsed from the LLM reply
        
    Returns:
        List of Finding objects (may be empty)
    """
    indicators: list[Finding] = []
    if not email_content:
        return indicators
    
    if risk_score > HIGH_RISK_SCORE:
        if URGENCY_PATTERN.search(email_content):
            indicators.append(Finding(
                type="Urgency Tactics",
                description="Email uses urgent language to pressure immediate action",
                severity="HIGH",
            ))
        
        if SUSPICIOUS_LINK_PATTERN.search(email_content):
            indicators.append(Finding(
                type="Suspicious Links",
                description="Email contains suspicious call-to-action links",
                severity="HIGH",
            ))
    
    elif risk_score > MEDIUM_RISK_SCORE:
        if len(CAPS_RUN_PATTERN.findall(email_content)) >= 2:
            indicators.append(Finding(
                type="Formatting Anomalies",
                description="Unusual capitalization patterns detected",
                severity="MEDIUM",
            ))
    
    return indicators


# =============================================================================
# LOG ANOMALIES
# =============================================================================

def detect_auth_failures(log_content: str) -> Optional[Finding]:
    """Flag repeated authentication failure keywords."""
    count = len(AUTH_FAILURE_PATTERN.findall(log_content))
    if count <= AUTH_FAILURE_THRESHOLD:
        return None
    
    return Finding(
        type="Authentication Failures",
        description=f"Multiple authentication failures detected ({count} instances)",
        severity="HIGH" if count > AUTH_FAILURE_HIGH_THRESHOLD else "MEDIUM",
    )


def detect_ip_spread(log_content: str) -> Optional[Finding]:
    """Flag logs touching many distinct IPv4 addresses."""
    unique_ips = set(IPV4_PATTERN.findall(log_content))
    if len(unique_ips) <= UNIQUE_IP_THRESHOLD:
        return None
    
    return Finding(
        type="Multiple IP Addresses",
        description=f"High number of unique IP addresses detected ({len(unique_ips)} IPs)",
        severity="MEDIUM",
    )


def detect_error_rate(log_content: str) -> Optional[Finding]:
    """Flag logs with many error-level keywords."""
    count = len(ERROR_PATTERN.findall(log_content))
    if count <= ERROR_THRESHOLD:
        return None
    
    return Finding(
        type="High Error Rate",
        description=f"Elevated error rate detected ({count} errors)",
        severity="MEDIUM",
    )


def detect_log_anomalies(log_content: str) -> list[Finding]:
    """
    Run all log checks over the full log text and collect triggered findings.
    
    Args:
        log_content: Full, untruncated log text
        
    Returns:
        List of triggered Finding objects in a fixed order (may be empty)
    """
    if not log_content:
        return []
    
    results = [
        detect_auth_failures(log_content),
        detect_ip_spread(log_content),
        detect_error_rate(log_content),
    ]
    
    return [finding for finding in results if finding is not None]


def first_non_blank_lines(text: str, limit: int = 20) -> list[str]:
    """First `limit` lines of text that contain something besides whitespace."""
    lines = []
    for line in (text or "").splitlines():
        if not line.strip():
            continue
        lines.append(line)
        if len(lines) >= limit:
            break
    return lines
