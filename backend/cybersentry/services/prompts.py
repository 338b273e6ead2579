# Name: prompts.py
# Description: Prompt templates for the phishing, log and log-line flows
# Date: 2026-10-12
#
# The header keywords in the templates (Risk Score / Summary / Detailed
# Analysis / Recommendations) are what services.parser recognizes. Changing
# them is a breaking change for the parser.

from typing import Optional

from cybersentry.core.config import DEFAULT_MAX_PROMPT_CHARS

PROMPT_VERSION = "1"

DEFAULT_LOG_FILENAME = "system.log"


# =============================================================================
# PROMPT TEMPLATES
# =============================================================================

PHISHING_PROMPT_TEMPLATE = """
You are a cybersecurity expert analyzing emails for phishing indicators. Analyze the following email content and provide a structured assessment.
{headers_note}
EMAIL CONTENT:
{content}

ANALYSIS INSTRUCTIONS:
1. Examine the email for common phishing indicators:
   - Sender spoofing or suspicious domains
   - Urgent language and pressure tactics
   - Suspicious links or attachments
   - Grammar and spelling errors
   - Requests for sensitive information
   - Generic greetings or impersonal language

2. Provide your analysis in this exact format:

Risk Score: [number from 1-10]
Summary: [2-3 sentence overview of your findings]
Detailed Analysis: [Comprehensive explanation of what you found and why it's suspicious or legitimate]
Indicators Found:
- [List specific phishing indicators you identified]
Recommendations:
- [Specific actions the recipient should take]

Be thorough but concise. Focus on actionable insights.
"""

HEADERS_NOTE = """
The content below includes the full email header block. Also check the headers for sender spoofing, mismatched Reply-To or Return-Path addresses, and failed SPF/DKIM/DMARC results.
"""

LOGS_PROMPT_TEMPLATE = """
You are a cybersecurity analyst reviewing system logs for security anomalies. Analyze the following log entries for potential security threats.

LOG FILE: {filename}
LOG CONTENT:
{content}

ANALYSIS INSTRUCTIONS:
1. Look for security-relevant patterns:
   - Failed authentication attempts
   - Unusual IP addresses or geographic locations
   - Privilege escalation attempts
   - Suspicious network connections
   - Error patterns indicating attacks
   - Brute force attempts
   - Unusual timing patterns

2. Provide your analysis in this exact format:

Risk Score: [number from 1-10]
Summary: [Brief overview of security findings]
Detailed Analysis: [Explain notable patterns, anomalies, and their significance]
Anomalies Found:
- [List specific security concerns you identified]
Recommendations:
- [Security actions to take based on findings]

Focus on actionable security insights.
"""

EXPLAIN_LINE_PROMPT_TEMPLATE = """
Explain this system log entry in simple, clear language for a system administrator:

LOG LINE: {content}

Provide a concise explanation that covers:
1. What this log entry means in plain English
2. Whether this indicates normal or suspicious activity
3. Any action that might be needed (if any)

Keep the explanation practical and easy to understand.
"""


# =============================================================================
# BUILDERS
# =============================================================================

def truncate(text: str, limit: int = DEFAULT_MAX_PROMPT_CHARS) -> str:
    """
    Cut user content to at most `limit` characters.
    
    Over-long input is silently truncated, never rejected. Slicing a Python
    str counts code points, so a surrogate pair is never split.
    """
    if not text:
        return ""
    return text[:limit]


def build_phishing_prompt(
    email_content: str,
    include_headers: bool = False,
    limit: int = DEFAULT_MAX_PROMPT_CHARS,
) -> str:
    """Build the phishing assessment prompt."""
    return PHISHING_PROMPT_TEMPLATE.format(
        headers_note=HEADERS_NOTE if include_headers else "",
        content=truncate(email_content, limit),
    )


def build_logs_prompt(
    log_content: str,
    filename: Optional[str] = None,
    limit: int = DEFAULT_MAX_PROMPT_CHARS,
) -> str:
    """Build the security log assessment prompt."""
    return LOGS_PROMPT_TEMPLATE.format(
        filename=filename or DEFAULT_LOG_FILENAME,
        content=truncate(log_content, limit),
    )


def build_explain_line_prompt(log_line: str, limit: int = DEFAULT_MAX_PROMPT_CHARS) -> str:
    """Build the free-text log line explanation prompt (no skeleton)."""
    return EXPLAIN_LINE_PROMPT_TEMPLATE.format(content=truncate(log_line, limit))


def render_skeleton(
    risk_score: int,
    summary: str,
    detailed_analysis: str,
    recommendations: list[str],
) -> str:
    """
    Render a reply in the exact shape the prompts ask the LLM for.
    
    Used as a reference reply in tests and by fake LLM clients.
    """
    lines = [
        f"Risk Score: {risk_score}",
        f"Summary: {summary}",
        f"Detailed Analysis: {detailed_analysis}",
        "Recommendations:",
    ]
    lines.extend(f"- {rec}" for rec in recommendations)
    return "\n".join(lines)
