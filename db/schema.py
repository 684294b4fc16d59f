from __future__ import annotations

import sqlite3


def bootstrap(conn: sqlite3.Connection) -> None:
    """Create members, canonical orgs and history tables with indexes (idempotent)."""
    cur = conn.cursor()

    # Members table
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS members (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  linkedin_url TEXT,\n"
            "  headline TEXT,\n"
            "  profile_picture TEXT,\n"
            "  current_location TEXT,\n"
            "  current_location_latitude REAL,\n"
            "  current_location_longitude REAL,\n"
            "  accepted_at TEXT,\n"
            "  linkedin_synced_at TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_members_linkedin_url ON members(linkedin_url);")
    cur.execute("CREATE INDEX IF NOT EXISTS idx_members_linkedin_synced_at ON members(linkedin_synced_at);")

    # Canonical schools and companies, keyed by their LinkedIn id
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS schools (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  name TEXT NOT NULL,\n"
            "  linkedin_id TEXT UNIQUE,\n"
            "  logo_url TEXT,\n"
            "  address_city TEXT,\n"
            "  address_state TEXT,\n"
            "  address_zip TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS companies (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  name TEXT NOT NULL,\n"
            "  linkedin_id TEXT UNIQUE,\n"
            "  image_url TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now'))\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_companies_name ON companies(name);")

    # Other LinkedIn ids (vanity slugs) the organization lookup answered for
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS school_linkedin_aliases (\n"
            "  alias TEXT PRIMARY KEY,\n"
            "  school_id TEXT NOT NULL,\n"
            "  FOREIGN KEY(school_id) REFERENCES schools(id) ON DELETE CASCADE\n"
            ")"
        )
    )
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS company_linkedin_aliases (\n"
            "  alias TEXT PRIMARY KEY,\n"
            "  company_id TEXT NOT NULL,\n"
            "  FOREIGN KEY(company_id) REFERENCES companies(id) ON DELETE CASCADE\n"
            ")"
        )
    )

    # Education history: exactly one of school_id / other_school
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS educations (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  member_id TEXT NOT NULL,\n"
            "  degree_type TEXT NOT NULL,\n"
            "  major TEXT NOT NULL,\n"
            "  other_major TEXT,\n"
            "  school_id TEXT,\n"
            "  other_school TEXT,\n"
            "  start_date TEXT NOT NULL,\n"
            "  end_date TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  linkedin_synced_at TEXT,\n"
            "  deleted_at TEXT,\n"
            "  CHECK ((school_id IS NULL) <> (other_school IS NULL)),\n"
            "  FOREIGN KEY(member_id) REFERENCES members(id) ON DELETE CASCADE,\n"
            "  FOREIGN KEY(school_id) REFERENCES schools(id) ON DELETE SET NULL\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_educations_member_id ON educations(member_id);")

    # Work history: exactly one of company_id / company_name
    cur.execute(
        (
            "CREATE TABLE IF NOT EXISTS work_experiences (\n"
            "  id TEXT PRIMARY KEY,\n"
            "  member_id TEXT NOT NULL,\n"
            "  title TEXT NOT NULL,\n"
            "  company_id TEXT,\n"
            "  company_name TEXT,\n"
            "  employment_type TEXT,\n"
            "  location_type TEXT,\n"
            "  location_city TEXT,\n"
            "  location_state TEXT,\n"
            "  start_date TEXT NOT NULL,\n"
            "  end_date TEXT,\n"
            "  description TEXT,\n"
            "  source TEXT,\n"
            "  created_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  updated_at TEXT NOT NULL DEFAULT (datetime('now')),\n"
            "  linkedin_synced_at TEXT,\n"
            "  deleted_at TEXT,\n"
            "  CHECK ((company_id IS NULL) <> (company_name IS NULL)),\n"
            "  FOREIGN KEY(member_id) REFERENCES members(id) ON DELETE CASCADE,\n"
            "  FOREIGN KEY(company_id) REFERENCES companies(id) ON DELETE SET NULL\n"
            ")"
        )
    )
    cur.execute("CREATE INDEX IF NOT EXISTS idx_work_experiences_member_id ON work_experiences(member_id);")

    conn.commit()


def bootstrap_cache(conn: sqlite3.Connection) -> None:
    """Create the key/value cache table (lives in its own database file)."""
    conn.execute(
        (
            "CREATE TABLE IF NOT EXISTS cache_entries (\n"
            "  key TEXT PRIMARY KEY,\n"
            "  value TEXT NOT NULL,\n"
            "  expires_at REAL\n"
            ")"
        )
    )
    conn.execute("CREATE INDEX IF NOT EXISTS idx_cache_entries_expires_at ON cache_entries(expires_at);")
    conn.commit()
