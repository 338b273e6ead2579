# Name: parser.py
# Description: Line-oriented recognizer for the LLM's header-and-bullet replies
# Date: 2026-10-12
#
# The parser is tolerant: headers the LLM omits leave their fields empty and
# the orchestrator fills in fallbacks later. It never raises on bad input.

import re
from enum import Enum

from cybersentry.models.analysis import ParsedReport
from cybersentry.services.scoring import DEFAULT_RISK_SCORE, clamp_score


class Section(Enum):
    """Which multi-line section subsequent lines belong to."""
    NONE = "none"
    SUMMARY = "summary"
    ANALYSIS = "analysis"
    RECOMMENDATIONS = "recommendations"


SCORE_NUMBER = re.compile(r'-?\d+', re.ASCII)

# Lines that introduce a later section and so must not be glued onto an
# earlier one
SUMMARY_STOP = re.compile(r'detailed|analysis|indicator|anomal|recommendation')
ANALYSIS_STOP = re.compile(r'indicator|anomal|recommendation')

BULLET_START = re.compile(r'^[-•*\d.\s]')
BULLET_PREFIX = re.compile(r'^[-•*\d.\s]+')


def _value_after_colon(line: str) -> str:
    """Text after the first colon, keeping any later colons."""
    _, _, value = line.partition(':')
    return value.strip()


def parse_llm_response(text: str) -> ParsedReport:
    """
    Convert free-form LLM text into a ParsedReport.
    
    Recognized (case-insensitive) headers:
        - "Risk Score: N" / "Score: N" → risk_score, clamped to 1-10
        - "Summary: ..."               → summary (continues on later lines)
        - "Detailed Analysis: ..."     → detailed_analysis (continues)
        - "Recommendations:"           → bullet list that follows
        - "Indicators ..:" / "Anomalies ..:" → skipped section (not when bulleted)
    
    Markdown bold markers ("**Summary:**") are ignored when matching headers.
    
    Args:
        text: Raw LLM reply
        
    Returns:
        ParsedReport with defaults for anything missing
    """
    risk_score = DEFAULT_RISK_SCORE
    summary = ""
    detailed_analysis = ""
    recommendations: list[str] = []
    section = Section.NONE
    
    for raw_line in (text or "").splitlines():
        line = raw_line.strip().replace('**', '').strip()
        if not line:
            continue
        lowered = line.lower()
        
        if 'risk score:' in lowered or 'score:' in lowered:
            match = SCORE_NUMBER.search(line)
            if match:
                risk_score = clamp_score(int(match.group()))
        
        elif lowered.startswith('summary:'):
            summary = _value_after_colon(line)
            section = Section.SUMMARY
        
        elif 'detailed analysis:' in lowered or lowered.startswith('analysis:'):
            detailed_analysis = _value_after_colon(line)
            section = Section.ANALYSIS
        
        elif (
            ('indicator' in lowered or 'anomal' in lowered)
            and ':' in line
            and not BULLET_START.match(line)
        ):
            section = Section.NONE
        
        elif 'recommendation' in lowered and ':' in line:
            section = Section.RECOMMENDATIONS
        
        elif section is Section.SUMMARY:
            if not SUMMARY_STOP.search(lowered):
                summary = f"{summary} {line}".strip()
        
        elif section is Section.ANALYSIS:
            if not ANALYSIS_STOP.search(lowered):
                detailed_analysis = f"{detailed_analysis} {line}".strip()
        
        elif section is Section.RECOMMENDATIONS:
            if BULLET_START.match(line):
                recommendation = BULLET_PREFIX.sub('', line).strip()
                if recommendation:
                    recommendations.append(recommendation)
    
    return ParsedReport(
        risk_score=risk_score,
        summary=summary,
        detailed_analysis=detailed_analysis,
        recommendations=recommendations,
    )
