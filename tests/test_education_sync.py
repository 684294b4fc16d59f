from __future__ import annotations

from db.repos.educations_repo import EducationsRepo
from db.repos.schools_repo import SchoolsRepo
from models.linkedin_profile import LinkedInEducation
from models.sync_outcome import Created, Skipped, Updated
from services.canonical import SchoolResolver
from services.education_sync import EducationReconciler


def _entry(**overrides):
    data = {
        "schoolName": "Acme University",
        "schoolLinkedinUrl": "https://www.linkedin.com/school/acme-university/",
        "degree": "Bachelor of Science",
        "fieldOfStudy": "Computer Science",
        "startDate": {"year": 2019},
        "endDate": {"month": "May", "year": 2023},
    }
    data.update(overrides)
    return LinkedInEducation.model_validate(data)


def _reconciler(conn, organizations):
    repo = EducationsRepo(conn)
    return repo, EducationReconciler(repo, SchoolResolver(SchoolsRepo(conn), organizations))


def test_create_links_resolved_school(conn, add_member, organizations):
    add_member("m1", "https://linkedin.com/in/m1")
    repo, reconciler = _reconciler(conn, organizations)

    outcome = reconciler.reconcile("m1", _entry(), [])
    assert isinstance(outcome, Created)

    [row] = repo.list_for_member("m1")
    assert row.degree_type == "bachelors"
    assert row.major == "computer_science" and row.other_major is None
    assert row.school_id is not None and row.other_school is None
    assert row.school == "Acme University"
    assert (row.start_date, row.end_date) == ("2019-08-01", "2023-05-01")

    cur = conn.execute("SELECT address_city, address_state, address_zip FROM schools WHERE linkedin_id = ?", ("acme-university",))
    assert cur.fetchone() == ("Ithaca", "NY", "14850")


def test_create_falls_back_to_free_text(conn, add_member, organizations):
    add_member("m1", "https://linkedin.com/in/m1")
    repo, reconciler = _reconciler(conn, organizations)

    entry = _entry(
        schoolName="Night School",
        schoolLinkedinUrl="https://www.linkedin.com/school/unknown-school/",
        fieldOfStudy="Marine Biology",
    )
    assert isinstance(reconciler.reconcile("m1", entry, []), Created)

    [row] = repo.list_for_member("m1")
    assert row.school_id is None and row.other_school == "Night School"
    assert row.major == "other" and row.other_major == "Marine Biology"


def test_disqualified_entry_writes_nothing(conn, add_member, organizations):
    add_member("m1", "https://linkedin.com/in/m1")
    repo, reconciler = _reconciler(conn, organizations)

    for missing in ("degree", "fieldOfStudy", "startDate", "endDate"):
        outcome = reconciler.reconcile("m1", _entry(**{missing: None}), [])
        assert outcome == Skipped("disqualified")
    assert repo.list_for_member("m1") == []
    assert organizations.calls == []


def test_update_writes_only_changed_dates_then_is_idempotent(conn, add_member, organizations):
    add_member("m1", "https://linkedin.com/in/m1")
    repo, reconciler = _reconciler(conn, organizations)
    reconciler.reconcile("m1", _entry(), [])
    existing = repo.list_for_member("m1")

    outcome = reconciler.reconcile("m1", _entry(endDate={"month": "Dec", "year": 2023}), existing)
    assert isinstance(outcome, Updated)
    assert outcome.fields == ("end_date",)
    [row] = repo.list_for_member("m1")
    assert row.end_date == "2023-12-01"

    again = reconciler.reconcile("m1", _entry(endDate={"month": "Dec", "year": 2023}), repo.list_for_member("m1"))
    assert again == Skipped("unchanged", row.id)


def test_update_upgrades_free_text_school_when_resolvable(conn, add_member, organizations):
    add_member("m1", "https://linkedin.com/in/m1")
    repo = EducationsRepo(conn)
    repo.insert("m1", {
        "degree_type": "bachelors",
        "major": "computer_science",
        "other_school": "Acme University",
        "start_date": "2019-08-01",
        "end_date": "2023-05-01",
    })
    _, reconciler = _reconciler(conn, organizations)

    outcome = reconciler.reconcile("m1", _entry(), repo.list_for_member("m1"))
    assert isinstance(outcome, Updated)
    assert set(outcome.fields) == {"school_id", "other_school"}
    [row] = repo.list_for_member("m1")
    assert row.school_id is not None and row.other_school is None


def test_update_keeps_reference_when_school_unresolved(conn, add_member, organizations):
    add_member("m1", "https://linkedin.com/in/m1")
    repo, reconciler = _reconciler(conn, organizations)
    reconciler.reconcile("m1", _entry(), [])

    moved = _entry(schoolLinkedinUrl="https://www.linkedin.com/school/unknown-school/")
    outcome = reconciler.reconcile("m1", moved, repo.list_for_member("m1"))
    assert isinstance(outcome, Skipped)
    [row] = repo.list_for_member("m1")
    assert row.school_id is not None and row.other_school is None


def test_year_only_dates_keep_stored_months(conn, add_member, organizations):
    add_member("m1", "https://linkedin.com/in/m1")
    repo = EducationsRepo(conn)
    _, reconciler = _reconciler(conn, organizations)
    reconciler.reconcile("m1", _entry(startDate={"month": "Sep", "year": 2019}, endDate={"month": "Jun", "year": 2023}), [])
    [row] = repo.list_for_member("m1")
    assert (row.start_date, row.end_date) == ("2019-09-01", "2023-06-01")

    year_only = _entry(startDate={"year": 2019}, endDate={"year": 2023})
    assert reconciler.reconcile("m1", year_only, repo.list_for_member("m1")) == Skipped("unchanged", row.id)
    [row] = repo.list_for_member("m1")
    assert (row.start_date, row.end_date) == ("2019-09-01", "2023-06-01")

    # A full date still moves the stored one
    outcome = reconciler.reconcile("m1", _entry(startDate={"year": 2019}, endDate={"month": "Dec", "year": 2023}), [row])
    assert outcome.fields == ("end_date",)
