from __future__ import annotations

import pytest

from models.history_records import EducationRecord, WorkExperienceRecord
from models.linkedin_profile import LinkedInEducation, LinkedInExperience
from services.matching import (
    EXPERIENCE_MATCH_THRESHOLD,
    experience_match_score,
    find_matching_education,
    find_matching_experience,
    names_overlap,
    qualify_education,
    qualify_experience,
)


def _education(**overrides):
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


def _experience(**overrides):
    data = {
        "companyId": "c1",
        "companyName": "Acme Corp",
        "position": "Software Engineer",
        "startDate": {"month": "Jun", "year": 2023},
    }
    data.update(overrides)
    return LinkedInExperience.model_validate(data)


def _work(**overrides):
    data = {
        "id": "w1",
        "member_id": "m1",
        "title": "Software Engineer",
        "company_id": "co1",
        "company": "Acme Corp",
        "company_linkedin_id": "c1",
        "start_date": "2023-06-01",
        "end_date": None,
    }
    data.update(overrides)
    return WorkExperienceRecord.model_validate(data)


@pytest.mark.parametrize(
    "missing",
    [
        {"degree": None},
        {"fieldOfStudy": None},
        {"startDate": None},
        {"endDate": None},
    ],
)
def test_education_disqualified_when_required_field_missing(missing):
    assert qualify_education(_education(**missing)) is None


def test_education_disqualified_for_unrecognized_degree_or_yearless_dates():
    assert qualify_education(_education(degree="High School")) is None
    assert qualify_education(_education(startDate={"month": "Aug"})) is None


def test_education_matches_on_degree_and_school():
    scraped = qualify_education(_education())
    assert scraped is not None
    by_id = EducationRecord(
        id="e1", member_id="m1", degree_type="bachelors", major="computer_science",
        school_id="s1", school="Totally Different Name", school_linkedin_id="acme-university",
        start_date="2019-08-01", end_date="2023-05-01",
    )
    by_name = by_id.model_copy(update={"id": "e2", "school": "Acme", "school_linkedin_id": None})
    other_degree = by_id.model_copy(update={"id": "e3", "degree_type": "masters"})

    assert find_matching_education(scraped, [other_degree, by_id]).id == "e1"
    assert find_matching_education(scraped, [by_name]).id == "e2"
    assert find_matching_education(scraped, [other_degree]) is None


def test_names_overlap_is_case_sensitive_and_bidirectional():
    assert names_overlap("Acme", "Acme University")
    assert names_overlap("Acme University", "Acme")
    assert not names_overlap("acme", "Acme University")
    assert not names_overlap("", "Acme")
    assert not names_overlap(None, "Acme")


def test_experience_disqualified_without_company_id_or_start_year():
    assert qualify_experience(_experience(companyId=None)) is None
    assert qualify_experience(_experience(startDate={"month": "Jun"})) is None
    current = qualify_experience(_experience())
    assert current is not None and current.end_date is None


def test_experience_score_table():
    scraped = qualify_experience(_experience())
    # title 2 + start year 1 + start month 1 + both current 1
    assert experience_match_score(scraped, _work()) == 5
    assert experience_match_score(scraped, _work(title="SWE")) == 3


def test_experience_score_two_never_matches_three_always_matches():
    scraped = qualify_experience(_experience(endDate={"month": "Dec", "year": 2024}))
    # Title only: 2 points
    two = _work(id="w2", start_date="2020-02-01", end_date="2021-01-01")
    assert experience_match_score(scraped, two) == 2
    assert find_matching_experience(scraped, [two]) is None

    # Title + start year: 3 points
    three = _work(id="w3", start_date="2023-01-01", end_date="2022-01-01")
    assert experience_match_score(scraped, three) == EXPERIENCE_MATCH_THRESHOLD
    assert find_matching_experience(scraped, [three]).id == "w3"


def test_experience_company_identity_is_a_hard_gate():
    scraped = qualify_experience(_experience())
    other_company = _work(company="Globex", company_linkedin_id="c9")
    assert experience_match_score(scraped, other_company) == 5
    assert find_matching_experience(scraped, [other_company]) is None

    free_text = _work(company_id=None, company_name="Acme Corp", company_linkedin_id=None)
    assert find_matching_experience(scraped, [free_text]) is free_text


def test_experience_best_score_wins_and_ties_keep_first():
    scraped = qualify_experience(_experience())
    weak = _work(id="weak", title="Engineer")
    strong = _work(id="strong")
    assert find_matching_experience(scraped, [weak, strong]).id == "strong"
    twin = _work(id="twin")
    assert find_matching_experience(scraped, [strong, twin]).id == "strong"
