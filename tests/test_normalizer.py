"""Tests for salary, band and date heuristics and the source converters"""

from datetime import datetime, timezone

from healthjobs.core.models import HealthJobsUkVacancy, Listing, NhsVacancy, ScotNhsVacancy
from healthjobs.core.normalizer import (
    band_from_salary,
    convert_healthjobs_uk_vacancy,
    convert_nhs_vacancy,
    convert_scot_nhs_vacancy,
    mentions_visa,
    parse_band,
    parse_date,
    parse_salary,
    split_band_from_salary,
)


def test_salary_range_with_thousands_separators():
    assert parse_salary("£28,407 to £34,581") == (28407, 34581)


def test_salary_range_with_dash_and_decimals():
    assert parse_salary("£33,247.00 - £41,424.50 per annum") == (33247, 41424)


def test_salary_single_value():
    assert parse_salary("£45,000 a year") == (45000, None)


def test_salary_negotiable():
    assert parse_salary("Negotiable") == (None, None)
    assert parse_salary("£30,000 - negotiable") == (None, None)


def test_salary_outside_sanity_window():
    assert parse_salary("£500 to £600") == (None, None)
    assert parse_salary("£5,000") == (None, None)
    assert parse_salary("£300,000") == (None, None)


def test_salary_max_must_exceed_min():
    assert parse_salary("£40,000 to £30,000") == (40000, None)


def test_salary_garbage():
    assert parse_salary("") == (None, None)
    assert parse_salary(None) == (None, None)
    assert parse_salary("competitive") == (None, None)


def test_band_token_from_title():
    assert parse_band("Band 6 Staff Nurse", "£35,392 to £42,618") == "Band 6"


def test_band_token_case_and_letter():
    assert parse_band("Senior Pharmacist (band 8a)") == "Band 8A"


def test_band_token_from_salary_then_description():
    assert parse_band("Staff Nurse", "Band 5 £28,407") == "Band 5"
    assert parse_band("Staff Nurse", "", "This is a band 7 post") == "Band 7"


def test_band_from_salary_buckets():
    assert parse_band("Staff Nurse", salary_min=30000) == "Band 4-5"
    assert band_from_salary(22000) == "Band 2-3"
    assert band_from_salary(25000) == "Band 2-3"
    assert band_from_salary(40000) == "Band 6-7"
    assert band_from_salary(50000) == "Band 8a-8b"
    assert band_from_salary(75000) == "Band 8c+"
    assert band_from_salary(15000) == ""
    assert band_from_salary(None) == ""


def test_split_band_from_salary():
    assert split_band_from_salary("Band 5 (£33,247 - £41,424)") == (
        "Band 5",
        "(£33,247 - £41,424)",
    )
    assert split_band_from_salary("£25,000") == ("", "£25,000")


def test_parse_date_uk_format():
    parsed = parse_date("31/12/2024")
    assert parsed == datetime(2024, 12, 31, tzinfo=timezone.utc)


def test_parse_date_iso_and_named_month():
    assert parse_date("2024-03-01") == datetime(2024, 3, 1, tzinfo=timezone.utc)
    assert parse_date("2024-03-01T09:30:00Z") == datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)
    assert parse_date("5 March 2025") == datetime(2025, 3, 5, tzinfo=timezone.utc)


def test_parse_date_rejects_bad_input():
    assert parse_date("not-a-date") is None
    assert parse_date("31/02/2024") is None
    assert parse_date("") is None
    assert parse_date(None) is None


def test_mentions_visa():
    listing = Listing(id="1", external_id="1", title="", employer="", location="", source="")
    assert not mentions_visa(listing)
    listing.description = "Visa sponsorship available"
    assert mentions_visa(listing)
    listing.description = ""
    listing.visa_sponsorship = True
    assert mentions_visa(listing)


def test_convert_nhs_vacancy():
    vacancy = NhsVacancy(
        id="C9123-24-0001",
        title="Staff Nurse",
        employer="Leeds Teaching Hospitals",
        close_date="2025-01-31",
        locations=["Leeds", "Wakefield"],
        reference="C9123-24-0001",
        salary="£28,407 to £34,581 a year",
        type="Permanent",
    )
    listing = convert_nhs_vacancy(vacancy, source="NHS Jobs England")

    assert listing.id == "C9123-24-0001"
    assert listing.location == "Leeds"
    assert listing.band == "Band 4-5"
    assert (listing.salary_min, listing.salary_max) == (28407, 34581)
    assert listing.closing_date == datetime(2025, 1, 31, tzinfo=timezone.utc)
    assert listing.url == "https://www.jobs.nhs.uk/candidate/jobadvert/C9123-24-0001"
    assert listing.contract_type == "Permanent"
    assert listing.source == "NHS Jobs England"


def test_convert_healthjobs_uk_vacancy_uses_grade():
    vacancy = HealthJobsUkVacancy(
        id="hjuk_job/UK/Nursing/123",
        title="Theatre Practitioner",
        grade="Agenda for Change",
        salary="£29,970 - £36,483",
    )
    listing = convert_healthjobs_uk_vacancy(vacancy, source="HealthJobsUK")
    assert listing.band == "Agenda for Change"
    assert listing.salary_min == 29970


def test_convert_scot_nhs_vacancy_keeps_split_band():
    vacancy = ScotNhsVacancy(
        id="scot_1234",
        title="Community Nurse",
        salary="(£33,247 - £41,424)",
        band="Band 5",
        close_date="14/02/2025",
        employment_type="Fixed term",
    )
    listing = convert_scot_nhs_vacancy(vacancy, source="NHS Scotland")
    assert listing.band == "Band 5"
    assert (listing.salary_min, listing.salary_max) == (33247, 41424)
    assert listing.contract_type == "Fixed term"
    assert listing.closing_date == datetime(2025, 2, 14, tzinfo=timezone.utc)
