from __future__ import annotations

from datetime import date

import pytest

from models.linkedin_profile import LinkedInDate
from services.dates import normalize_date, to_iso


@pytest.mark.parametrize(
    "partial, role, expected",
    [
        ({"year": 2022}, "education-start", date(2022, 8, 1)),
        ({"year": 2022}, "education-end", date(2022, 5, 1)),
        ({"year": 2022}, "experience-start", date(2022, 1, 1)),
        ({"year": 2022}, "experience-end", date(2022, 12, 1)),
        ({"month": "Jan", "year": 2022}, "experience-start", date(2022, 1, 1)),
        ({"month": "Jun", "year": 2023}, "education-end", date(2023, 6, 1)),
    ],
)
def test_normalize_date_fallbacks(partial, role, expected):
    assert normalize_date(partial, role) == expected


@pytest.mark.parametrize("role", ["education-start", "education-end", "experience-start", "experience-end"])
def test_normalize_date_without_year_is_none(role):
    assert normalize_date({}, role) is None
    assert normalize_date({"month": "Mar"}, role) is None
    assert normalize_date(None, role) is None


def test_normalize_date_accepts_model_and_unknown_month():
    assert normalize_date(LinkedInDate(month="Sept", year=2020), "experience-start") == date(2020, 9, 1)
    # Unrecognized month text falls back to the role default
    assert normalize_date(LinkedInDate(month="Spring", year=2020), "education-start") == date(2020, 8, 1)


def test_normalize_date_rejects_unknown_role():
    with pytest.raises(ValueError):
        normalize_date({"year": 2020}, "graduation")  # type: ignore[arg-type]


def test_to_iso():
    assert to_iso(date(2019, 8, 1)) == "2019-08-01"
    assert to_iso(None) is None
