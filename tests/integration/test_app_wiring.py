from __future__ import annotations

from structlog.testing import capture_logs

from sortviz.app.main import create_session
from sortviz.renderers import LogRenderer


def test_created_session_renders_run_as_logs(fast_settings) -> None:
    session = create_session(app_settings=fast_settings, components=[LogRenderer()])
    session.configure(algorithm="selection", size=8)

    with capture_logs() as logs:
        assert session.run(timeout=10) == "completed"

    events = [entry["event"] for entry in logs]
    assert "render.completed" in events

    states = [(e["previous"], e["current"]) for e in logs if e["event"] == "render.state"]
    assert states == [("idle", "running"), ("running", "completed")]

    percents = [e["percent"] for e in logs if e["event"] == "render.progress"]
    assert percents == sorted(percents)
    assert len(percents) == len(set(percents))
    assert percents[-1] == 100


def test_failed_run_is_logged_at_error(fast_settings) -> None:
    session = create_session(app_settings=fast_settings, components=[LogRenderer()])
    session.load([5, -2, 9])
    session.configure(algorithm="radix")

    with capture_logs() as logs:
        assert session.run(timeout=10) == "failed"

    failed = [e for e in logs if e["event"] == "render.state" and e["current"] == "failed"]
    assert len(failed) == 1
    assert failed[0]["log_level"] == "error"
    assert failed[0]["error_type"] == "ValueError"
