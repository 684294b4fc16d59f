from __future__ import annotations

from db.repos.companies_repo import CompaniesRepo
from db.repos.schools_repo import SchoolsRepo
from models.linkedin_profile import LinkedInOrganization
from services.apify_client import ApifyError
from services.canonical import CompanyResolver, SchoolResolver, state_code


def test_company_resolver_reuses_existing_row(conn, organizations):
    repo = CompaniesRepo(conn)
    existing = repo.insert("Acme Corp", "c1")
    resolver = CompanyResolver(repo, organizations)

    assert resolver.resolve_or_create("c1") == existing
    assert organizations.calls == []


def test_company_resolver_creates_from_lookup(conn, organizations):
    resolver = CompanyResolver(CompaniesRepo(conn), organizations)
    company_id = resolver.resolve_or_create("c1")
    assert company_id is not None
    row = conn.execute("SELECT id, name, image_url FROM companies WHERE linkedin_id = ?", ("c1",)).fetchone()
    assert row == (company_id, "Acme Corp", "https://media.example/acme.png")
    # Second call hits the database, not the lookup
    assert resolver.resolve_or_create("c1") == company_id
    assert organizations.calls == ["c1"]


def test_unresolved_and_failing_lookups_return_none(conn, organizations):
    assert CompanyResolver(CompaniesRepo(conn), organizations).resolve_or_create("nope") is None
    assert CompanyResolver(CompaniesRepo(conn)).resolve_or_create("c1") is None
    assert SchoolResolver(SchoolsRepo(conn), organizations).resolve_or_create(None) is None

    def _broken(linkedin_id):
        raise ApifyError("actor failed")

    assert SchoolResolver(SchoolsRepo(conn), _broken).resolve_or_create("acme-university") is None


def test_school_resolver_abbreviates_state(conn, organizations):
    school_id = SchoolResolver(SchoolsRepo(conn), organizations).resolve_or_create("acme-university")
    row = conn.execute("SELECT id, name, address_state FROM schools WHERE linkedin_id = ?", ("acme-university",)).fetchone()
    assert row == (school_id, "Acme University", "NY")


def test_state_code():
    assert state_code("California") == "CA"
    assert state_code("Ontario") == "Ontario"
    assert state_code(None) is None


def test_vanity_slug_is_remembered_as_alias(conn):
    calls = []

    def _lookup(linkedin_id):
        calls.append(linkedin_id)
        return LinkedInOrganization.model_validate({"id": "1035", "name": "Acme Corp"})

    resolver = CompanyResolver(CompaniesRepo(conn), _lookup)

    company_id = resolver.resolve_or_create("acme-corp")
    assert conn.execute("SELECT linkedin_id FROM companies WHERE id = ?", (company_id,)).fetchone() == ("1035",)

    assert resolver.resolve_or_create("acme-corp") == company_id
    assert resolver.resolve_or_create("1035") == company_id
    assert calls == ["acme-corp"]
