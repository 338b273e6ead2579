"""
Tests for the analysis orchestrator, driven with a fake LLM client
"""
import asyncio
from datetime import datetime, timezone

import pytest

from cybersentry.core.errors import LLMError, NetworkError, ValidationError
from cybersentry.services.analysis_service import (
    DEFAULT_LOG_RECS,
    DEFAULT_PHISHING_RECS,
    AnalysisOrchestrator,
)
from cybersentry.services.scoring import determine_risk_level

from conftest import FakeLLM

URGENT_EMAIL = "URGENT: Verify your account NOW or it will be suspended. Click here: http://x"


def _run(coro):
    return asyncio.run(coro)


def _brute_force_log():
    return "\n".join(
        f"Jan 10 12:00:{i:02d} sshd[100]: authentication failed for root from 10.0.0.{i % 12 + 1}"
        for i in range(25)
    )


def test_phishing_high_urgency():
    llm = FakeLLM(
        "Risk Score: 8\nSummary: Likely phishing.\nDetailed Analysis: Urgency + bad link.\n"
        "Recommendations:\n- Do not click\n- Report"
    )
    response = _run(AnalysisOrchestrator(llm).analyze_phishing(URGENT_EMAIL, False))

    assert response.analysis_type == "phishing_email"
    assert response.risk_score == 8
    assert response.risk_level == "CRITICAL"
    assert [(f.type, f.severity) for f in response.indicators] == [
        ("Urgency Tactics", "HIGH"),
        ("Suspicious Links", "HIGH"),
    ]
    assert response.recommendations == ["Do not click", "Report"]
    assert response.anomalies is None
    assert response.log_lines is None


def test_phishing_benign_uses_fallback_recommendations():
    llm = FakeLLM("Risk Score: 1\nSummary: Legitimate.\nDetailed Analysis: Normal internal notice.")
    response = _run(AnalysisOrchestrator(llm).analyze_phishing("The cafeteria closes early today."))

    assert response.risk_level == "LOW"
    assert response.indicators == []
    assert response.recommendations == DEFAULT_PHISHING_RECS


def test_phishing_unstructured_reply_falls_back_to_raw_text():
    raw = "I could not follow the format, but this looks fine."
    response = _run(AnalysisOrchestrator(FakeLLM(raw)).analyze_phishing("hello"))

    assert response.risk_score == 5
    assert response.risk_level == "MEDIUM"
    assert response.summary == "Email phishing analysis completed"
    assert response.detailed_analysis == raw


def test_phishing_heuristics_see_full_input():
    email = "Quarterly report attached. " * 80 + "Your mailbox will expire tonight."
    llm = FakeLLM("Risk Score: 9\nSummary: Suspicious.")
    response = _run(AnalysisOrchestrator(llm).analyze_phishing(email))

    assert "expire tonight" not in llm.prompts[0]
    assert [f.type for f in response.indicators] == ["Urgency Tactics"]


def test_phishing_rejects_empty_content():
    llm = FakeLLM("Risk Score: 9")
    with pytest.raises(ValidationError):
        _run(AnalysisOrchestrator(llm).analyze_phishing(""))
    assert llm.prompts == []


def test_phishing_accepts_whitespace_only_content():
    llm = FakeLLM("Risk Score: 2\nSummary: Nothing to see.")
    response = _run(AnalysisOrchestrator(llm).analyze_phishing("   \n\t "))

    assert len(llm.prompts) == 1
    assert response.risk_score == 2


def test_phishing_propagates_llm_failure():
    llm = FakeLLM(error=NetworkError("timeout"))
    with pytest.raises(LLMError):
        _run(AnalysisOrchestrator(llm).analyze_phishing(URGENT_EMAIL))


def test_logs_brute_force():
    llm = FakeLLM("Risk Score: 7\nSummary: Brute force suspected.")
    response = _run(AnalysisOrchestrator(llm).analyze_logs(_brute_force_log()))

    assert response.analysis_type == "security_logs"
    assert response.risk_level == "HIGH"
    assert response.summary == "Brute force suspected."

    by_type = {f.type: f for f in response.anomalies}
    assert by_type["Authentication Failures"].severity == "HIGH"
    assert "(25 instances)" in by_type["Authentication Failures"].description
    assert by_type["Multiple IP Addresses"].severity == "MEDIUM"
    assert "(12 IPs)" in by_type["Multiple IP Addresses"].description
    assert len(response.log_lines) == 20
    assert response.recommendations == DEFAULT_LOG_RECS
    assert response.indicators is None


def test_logs_quiet():
    log = "\n".join(f"2024-05-01T10:00:0{i} INFO worker started job {i}" for i in range(5))
    llm = FakeLLM("Risk Score: 2\nSummary: Routine activity.")
    response = _run(AnalysisOrchestrator(llm).analyze_logs(log + "\n\n"))

    assert response.anomalies == []
    assert len(response.log_lines) == 5
    assert all(line.strip() for line in response.log_lines)


def test_logs_filename_reaches_prompt():
    llm = FakeLLM("Risk Score: 2")
    _run(AnalysisOrchestrator(llm).analyze_logs("INFO ok", "auth.log"))
    _run(AnalysisOrchestrator(llm).analyze_logs("INFO ok"))

    assert "LOG FILE: auth.log" in llm.prompts[0]
    assert "LOG FILE: system.log" in llm.prompts[1]


def test_logs_rejects_empty_content():
    with pytest.raises(ValidationError):
        _run(AnalysisOrchestrator(FakeLLM("Risk Score: 2")).analyze_logs(""))


def test_explain_line_returns_trimmed_text():
    llm = FakeLLM("\n  The SSH daemon accepted a key login.  \n")
    explanation = _run(AnalysisOrchestrator(llm).explain_log_line("sshd: Accepted publickey"))

    assert explanation == "The SSH daemon accepted a key login."


def test_explain_line_recovers_from_llm_failure():
    llm = FakeLLM(error=NetworkError("timeout"))
    explanation = _run(AnalysisOrchestrator(llm).explain_log_line("kernel: oops"))

    assert explanation == "Unable to explain log line: timeout"


def test_timestamp_set_after_llm_call():
    class RecordingLLM(FakeLLM):
        async def generate(self, prompt):
            self.called_at = datetime.now(timezone.utc)
            return await super().generate(prompt)

    llm = RecordingLLM("Risk Score: 4")
    response = _run(AnalysisOrchestrator(llm).analyze_phishing("hi"))

    stamp = datetime.fromisoformat(response.analysis_timestamp.replace("Z", "+00:00"))
    called_ms = llm.called_at.replace(microsecond=llm.called_at.microsecond // 1000 * 1000)
    assert response.analysis_timestamp.endswith("Z")
    assert stamp >= called_ms


def test_repeated_requests_give_identical_findings():
    llm = FakeLLM("Risk Score: 8\nSummary: Phish.")
    orchestrator = AnalysisOrchestrator(llm)
    first = _run(orchestrator.analyze_phishing(URGENT_EMAIL))
    second = _run(orchestrator.analyze_phishing(URGENT_EMAIL))

    assert first.model_dump(exclude={"analysis_timestamp"}) == second.model_dump(exclude={"analysis_timestamp"})


@pytest.mark.parametrize("reply", ["Risk Score: 99", "Risk Score: -3", "no score at all"])
def test_band_matches_score(reply):
    response = _run(AnalysisOrchestrator(FakeLLM(reply)).analyze_logs("INFO ok"))

    assert 1 <= response.risk_score <= 10
    assert response.risk_level == determine_risk_level(response.risk_score)
    assert response.recommendations
