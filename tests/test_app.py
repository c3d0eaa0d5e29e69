from pathlib import Path

import pytest
from streamlit.testing.v1 import AppTest

from aesthetic_lab.client import AnalysisClient
from aesthetic_lab.errors import USER_FACING_ERROR, ServiceUnavailableError
from aesthetic_lab.session import AnalysisPhase, AnalysisSession

APP_PATH = str(Path(__file__).resolve().parent.parent / "app.py")
SESSION_KEY = "aesthetic_session"


@pytest.fixture(autouse=True)
def no_credential(monkeypatch):
    for name in ("GEMINI_API_KEY", "GOOGLE_API_KEY", "API_KEY"):
        monkeypatch.delenv(name, raising=False)


def run_app(session=None):
    at = AppTest.from_file(APP_PATH, default_timeout=30)
    if session is not None:
        at.session_state[SESSION_KEY] = session
    at.run()
    assert not at.exception
    return at


def markdown_text(at):
    return "\n".join(md.value for md in at.markdown)


def button_keys(at):
    return [button.key for button in at.button]


def stub_analyze(monkeypatch, result=None, error=None):
    calls = []

    async def analyze(self, frontal, lateral, oblique):
        calls.append((frontal, lateral, oblique))
        if error is not None:
            raise error
        return result

    monkeypatch.setattr(AnalysisClient, "analyze", analyze)
    return calls


def test_fresh_page_has_disabled_submit():
    at = run_app()

    submit = at.button(key="submit")
    assert submit.disabled
    assert submit.label == "请补全三张诊断影像"
    assert len(at.error) == 0


def test_error_phase_keeps_slots_and_allows_retry(ready_session):
    ready_session.begin()
    ready_session.fail()

    at = run_app(ready_session)

    assert USER_FACING_ERROR in at.error[0].value
    submit = at.button(key="submit")
    assert not submit.disabled
    assert submit.label == "生成临床级诊断报告"


def test_submit_failure_returns_to_upload_with_message(monkeypatch, ready_session):
    calls = stub_analyze(monkeypatch, error=ServiceUnavailableError("connection reset"))
    images = ready_session.images
    at = run_app(ready_session)

    at.button(key="submit").click().run()

    assert not at.exception
    session = at.session_state[SESSION_KEY]
    assert session.phase == AnalysisPhase.ERROR
    assert session.images == images
    assert calls == [images]
    assert USER_FACING_ERROR in at.error[0].value
    assert not at.button(key="submit").disabled


def test_submit_success_shows_report(monkeypatch, ready_session, report):
    calls = stub_analyze(monkeypatch, result=report)
    at = run_app(ready_session)

    at.button(key="submit").click().run()

    assert not at.exception
    session = at.session_state[SESSION_KEY]
    assert session.phase == AnalysisPhase.COMPLETED
    assert len(calls) == 1
    text = markdown_text(at)
    assert "82" in text
    assert "balanced" in text
    assert "submit" not in button_keys(at)
    assert "restart" in button_keys(at)


def test_pending_analysis_runs_once_and_settles(monkeypatch, ready_session, report):
    calls = stub_analyze(monkeypatch, result=report)
    ready_session.begin()

    at = run_app(ready_session)
    at.run()

    assert len(calls) == 1
    assert at.session_state[SESSION_KEY].phase == AnalysisPhase.COMPLETED
    assert "submit" not in button_keys(at)


def test_unexpected_failure_is_not_repeated_on_rerun(monkeypatch, ready_session):
    calls = stub_analyze(monkeypatch, error=RuntimeError("bug"))
    at = run_app(ready_session)

    at.button(key="submit").click().run()

    assert at.exception
    assert at.session_state[SESSION_KEY].phase == AnalysisPhase.ERROR

    at.run()

    assert not at.exception
    assert len(calls) == 1
    assert USER_FACING_ERROR in at.error[0].value


def test_completed_report(ready_session, report):
    ready_session.begin()
    ready_session.complete(report)

    at = run_app(ready_session)
    text = markdown_text(at)

    assert "82" in text
    assert "balanced" in text
    # No medical beauty suggestions in this report
    assert "医学整形及微调方案" not in text
    assert "Clinical Insight" not in text


def test_feature_panel_toggles(ready_session, report):
    ready_session.begin()
    ready_session.complete(report)
    at = run_app(ready_session)

    at.button(key="feature_eyes").click().run()
    assert report.features.eyes in markdown_text(at)
    assert "Clinical Insight" in markdown_text(at)

    at.button(key="feature_nose").click().run()
    text = markdown_text(at)
    assert report.features.eyes not in text
    assert report.features.nose in text

    at.button(key="feature_nose").click().run()
    assert "Clinical Insight" not in markdown_text(at)


def test_restart_returns_to_upload(ready_session, report):
    ready_session.begin()
    ready_session.complete(report)
    at = run_app(ready_session)

    at.button(key="restart").click().run()

    assert not at.exception
    session = at.session_state[SESSION_KEY]
    assert isinstance(session, AnalysisSession)
    assert session.phase == AnalysisPhase.IDLE
    assert session.is_ready is False
    assert at.button(key="submit").disabled
