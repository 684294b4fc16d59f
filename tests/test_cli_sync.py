from __future__ import annotations

import json
import sqlite3
import sys
from typing import List

import pytest

from models.linkedin_profile import LinkedInProfile


def _run_cli_with_args(args_list: List[str]) -> None:
    argv_backup = sys.argv[:]
    try:
        sys.argv = ["cli.py"] + args_list
        if "cli" in sys.modules:
            del sys.modules["cli"]
        import cli  # type: ignore
        try:
            cli.main()  # type: ignore[attr-defined]
        except SystemExit as e:
            code = int(getattr(e, "code", 0) or 0)
            if code not in (0, None):
                raise
    finally:
        sys.argv = argv_backup


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.setenv("RUN_ENV", "test")
    monkeypatch.setenv("GOOGLE_MAPS_API_KEY", "")
    monkeypatch.setenv("LOG_LEVEL", "ERROR")
    monkeypatch.setenv("SYNC_EVENT_LOG_PATH", str(tmp_path / "events.jsonl"))
    # IMPORTANT: clear cached settings so env changes take effect
    from config.settings import get_settings
    get_settings.cache_clear()
    yield tmp_path
    get_settings.cache_clear()


def test_cli_bootstrap_sync_and_report(cli_env, monkeypatch, capsys):
    db_path = cli_env / "cli.db"
    cache_path = cli_env / "cli_cache.db"
    base = ["--db", str(db_path), "--cache-db", str(cache_path)]
    _run_cli_with_args(base + ["bootstrap"])

    conn = sqlite3.connect(str(db_path))
    try:
        conn.execute("INSERT INTO members (id, linkedin_url) VALUES (?, ?)", ("m1", "https://linkedin.com/in/m1"))
        conn.commit()
    finally:
        conn.close()

    import services.apify_client as apify

    calls = []

    def _fetch(self, keys):
        calls.append(list(keys))
        return [LinkedInProfile.model_validate({
            "element": {"headline": "Engineer", "location": {"parsed": {"text": None}}},
            "education": [],
            "experience": [{
                "companyId": "c1",
                "companyName": "Acme Corp",
                "position": "Engineer",
                "startDate": {"month": "Jun", "year": 2023},
            }],
            "originalQuery": {"query": key},
        }) for key in keys]

    monkeypatch.setattr(apify.ApifyProfileFetcher, "fetch_profiles", _fetch)
    monkeypatch.setattr(apify.OrganizationLookup, "__call__", lambda self, linkedin_id: None)

    capsys.readouterr()
    _run_cli_with_args(base + ["run", "sync-linkedin", "--batch-size", "10"])
    summary = json.loads(capsys.readouterr().out)
    assert summary["members_synced"] == 1
    assert summary["experiences_created"] == 1
    assert calls == [["https://linkedin.com/in/m1"]]

    _run_cli_with_args(base + ["report-member", "--member-id", "m1"])
    report = json.loads(capsys.readouterr().out)
    assert report["headline"] == "Engineer"
    [work] = report["work_experiences"]
    assert work["company_name"] == "Acme Corp" and work["company_id"] is None

    events = (cli_env / "events.jsonl").read_text(encoding="utf-8").splitlines()
    assert json.loads(events[0])["member_id"] == "m1"

    # Explicit re-sync is served from the cache
    _run_cli_with_args(base + ["run", "sync-linkedin", "--member-id", "m1"])
    summary = json.loads(capsys.readouterr().out)
    assert summary["cache_hits"] == 1
    assert summary["experiences_created"] == 0
    assert len(calls) == 1


def test_cli_report_unknown_member(cli_env, capsys):
    base = ["--db", str(cli_env / "r.db"), "--cache-db", str(cli_env / "r_cache.db")]
    _run_cli_with_args(base + ["report-member", "--member-id", "ghost"])
    assert "No record found" in capsys.readouterr().out
