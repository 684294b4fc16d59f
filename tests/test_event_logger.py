from __future__ import annotations

import json

from utils.event_logger import LINKEDIN_PROFILE_SYNCED, JsonlEventSink


def test_writes_jsonl_with_run_id(tmp_path, monkeypatch):
    monkeypatch.setenv("RUN_ID", "run-42")
    path = tmp_path / "logs" / "events.jsonl"
    sink = JsonlEventSink(str(path))

    sink.track(LINKEDIN_PROFILE_SYNCED, "m1", {"educations_created": 1})
    sink.track(LINKEDIN_PROFILE_SYNCED, "m2", {})

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    first = json.loads(lines[0])
    assert first["event"] == "linkedin_profile_synced"
    assert first["member_id"] == "m1"
    assert first["properties"] == {"educations_created": 1}
    assert first["run_id"] == "run-42"
    assert "ts" in first


def test_unwritable_path_does_not_raise(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    # Parent "directory" is a regular file
    JsonlEventSink(str(blocker / "events.jsonl")).track(LINKEDIN_PROFILE_SYNCED, "m1", {})
