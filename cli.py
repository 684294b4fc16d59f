import argparse
import json
import logging
import os
import uuid as _uuid

from config.settings import get_settings
from db import schema
from db.connection import get_connection
from db.repos.cache_repo import SqliteCache
from db.repos.educations_repo import EducationsRepo
from db.repos.members_repo import MembersRepo
from db.repos.work_experiences_repo import WorkExperiencesRepo
from pipelines.runner import RunContext
from pipelines.sync_linkedin import build_sync_pipeline
from utils.logging_setup import init_logging


logger = logging.getLogger(__name__)

_SUMMARY_KEYS = (
    "members_total",
    "batches",
    "cache_hits",
    "profiles_fetched",
    "profiles_dropped",
    "fetch_failures",
    "members_synced",
    "members_failed",
    "members_unmatched",
    "educations_created",
    "educations_updated",
    "educations_skipped",
    "experiences_created",
    "experiences_updated",
    "experiences_skipped",
)


def _open(args):
    conn = get_connection(args.db)
    schema.bootstrap(conn)
    cache_conn = get_connection(args.cache_db)
    schema.bootstrap_cache(cache_conn)
    return conn, cache_conn


def cmd_bootstrap(args):
    conn, cache_conn = _open(args)
    conn.close()
    cache_conn.close()
    print("Schema ready")


def cmd_sync_linkedin(args):
    conn, cache_conn = _open(args)
    try:
        purged = SqliteCache(cache_conn).purge_expired()
        if purged:
            logger.info("Purged %d expired cache entries", purged, extra={"step": "cache", "status": "purged"})
        pipeline = build_sync_pipeline(conn, cache_conn, batch_size=args.batch_size)
        ctx = RunContext(member_ids=args.member_id or None)
        ctx = pipeline.run(ctx)
    finally:
        conn.close()
        cache_conn.close()
    summary = {k: int(ctx.meta.get(k) or 0) for k in _SUMMARY_KEYS}
    print(json.dumps(summary, indent=2))


def cmd_run(args):
    if not os.getenv("RUN_ID"):
        os.environ["RUN_ID"] = _uuid.uuid4().hex
    if args.pipeline == "sync-linkedin":
        cmd_sync_linkedin(args)


def cmd_report_member(args):
    conn, cache_conn = _open(args)
    cache_conn.close()
    try:
        member = MembersRepo(conn).get(args.member_id)
        if not member:
            print("No record found for member")
            return
        result = dict(member)
        result["educations"] = [e.model_dump() for e in EducationsRepo(conn).list_for_member(args.member_id)]
        result["work_experiences"] = [
            w.model_dump() for w in WorkExperiencesRepo(conn).list_for_member(args.member_id)
        ]
    finally:
        conn.close()
    print(json.dumps(result, indent=2, ensure_ascii=False))


def main():
    settings = get_settings()
    init_logging(settings.log_level)
    parser = argparse.ArgumentParser(description="Member LinkedIn sync CLI")
    parser.add_argument("--db", default=settings.db_path, help="Path to SQLite DB (default from settings)")
    parser.add_argument("--cache-db", default=settings.cache_db_path, help="Path to SQLite cache DB (default from settings)")
    sub = parser.add_subparsers(dest="cmd", required=True)

    p_boot = sub.add_parser("bootstrap", help="Create tables and indexes")
    p_boot.set_defaults(func=cmd_bootstrap)

    p_rm = sub.add_parser("report-member", help="Show a member with education and work history")
    p_rm.add_argument("--member-id", required=True, help="Member id")
    p_rm.set_defaults(func=cmd_report_member)

    # Unified runner
    p_run = sub.add_parser("run", help="Run a named pipeline")
    p_run.add_argument("pipeline", choices=["sync-linkedin"], help="Pipeline to run")
    p_run.add_argument("--member-id", action="append", help="Member id to sync (repeatable). Default: all never-synced members")
    p_run.add_argument("--batch-size", type=int, default=None, help="Profiles per fetch (default from settings)")
    p_run.set_defaults(func=cmd_run)

    args = parser.parse_args()
    args.func(args)


if __name__ == "__main__":
    main()
