from datetime import date

import pytest

from models import Address, Orphan, OrphanList, OrphanStatus, OrphanSponsorshipStatus, Partner, Province
from services.orphan_pipeline import (
    BLANK, FUTURE_DATE, GESTATION, INVALID_DATE, NEGATIVE, NOT_BOOLEAN, NOT_IN_LIST, NOT_INTEGER,
    validate_orphan,
)

TODAY = date(2025, 3, 1)


def _address():
    return Address(city="Aleppo", neighborhood="Old City", province=Province(name="Aleppo", code="AL"))


def _valid_orphan(**overrides):
    partner = Partner(name="Partner", province=Province(name="Outside Syria", code="KR"))
    fields = dict(
        name="Omar",
        father_name="Khaled",
        father_is_martyr=False,
        father_date_of_death=date(2020, 1, 1),
        mother_name="Huda",
        mother_alive=True,
        date_of_birth=date(2019, 5, 5),
        gender="Male",
        contact_number="0944000000",
        sponsored_by_another_org=False,
        minor_siblings_count=0,
        priority="Normal",
        original_address=_address(),
        current_address=_address(),
        orphan_status=OrphanStatus(name="Active"),
        orphan_sponsorship_status=OrphanSponsorshipStatus(name="Unsponsored"),
        orphan_list=OrphanList(partner=partner),
    )
    fields.update(overrides)
    return Orphan(**fields)


def test_valid_orphan_has_no_errors():
    assert validate_orphan(_valid_orphan(), today=TODAY) == {}


@pytest.mark.parametrize("field", ["name", "father_name", "mother_name", "contact_number"])
@pytest.mark.parametrize("value", [None, "", "   "])
def test_required_text_fields(field, value):
    errors = validate_orphan(_valid_orphan(**{field: value}), today=TODAY)
    assert errors == {field: [BLANK]}


@pytest.mark.parametrize("field", ["original_address", "current_address", "orphan_status",
                                   "orphan_sponsorship_status", "orphan_list"])
def test_required_associations(field):
    errors = validate_orphan(_valid_orphan(**{field: None}), today=TODAY)
    assert errors == {field: [BLANK]}


@pytest.mark.parametrize("field", ["father_is_martyr", "mother_alive", "sponsored_by_another_org"])
def test_unset_boolean_is_an_error_but_false_is_not(field):
    assert validate_orphan(_valid_orphan(**{field: None}), today=TODAY) == {field: [NOT_BOOLEAN]}
    assert validate_orphan(_valid_orphan(**{field: False}), today=TODAY) == {}
    assert validate_orphan(_valid_orphan(**{field: True}), today=TODAY) == {}


def test_boolean_rejects_strings():
    errors = validate_orphan(_valid_orphan(mother_alive="yes"), today=TODAY)
    assert errors == {"mother_alive": [NOT_BOOLEAN]}


def test_dates_in_the_future_are_rejected():
    orphan = _valid_orphan(father_date_of_death=date(2025, 3, 2), date_of_birth=date(2025, 3, 2))
    errors = validate_orphan(orphan, today=TODAY)
    assert errors["father_date_of_death"] == [FUTURE_DATE]
    assert errors["date_of_birth"] == [FUTURE_DATE]


def test_today_is_not_a_future_date():
    orphan = _valid_orphan(father_date_of_death=TODAY, date_of_birth=TODAY)
    assert validate_orphan(orphan, today=TODAY) == {}


def test_missing_dates_are_blank_and_skip_gestation():
    errors = validate_orphan(_valid_orphan(father_date_of_death=None, date_of_birth=None), today=TODAY)
    assert errors == {"father_date_of_death": [BLANK], "date_of_birth": [BLANK]}


def test_string_dates_are_coerced():
    orphan = _valid_orphan(father_date_of_death="2020-01-01", date_of_birth="2020/11/01")
    assert orphan.father_date_of_death == date(2020, 1, 1)
    assert orphan.date_of_birth == date(2020, 11, 1)
    assert validate_orphan(orphan, today=TODAY) == {}


def test_unparseable_date_reported_once_without_gestation_error():
    orphan = _valid_orphan(date_of_birth="31/31/2020", father_date_of_death=date(2010, 1, 1))
    errors = validate_orphan(orphan, today=TODAY)
    assert errors == {"date_of_birth": [INVALID_DATE]}


def test_birth_more_than_a_year_after_fathers_death_fails():
    orphan = _valid_orphan(father_date_of_death=date(2020, 1, 1), date_of_birth=date(2021, 6, 1))
    errors = validate_orphan(orphan, today=TODAY)
    assert errors == {"date_of_birth": [GESTATION]}


def test_birth_within_a_year_after_fathers_death_passes():
    orphan = _valid_orphan(father_date_of_death=date(2020, 1, 1), date_of_birth=date(2020, 11, 1))
    assert validate_orphan(orphan, today=TODAY) == {}


def test_gestation_window_boundary():
    on_the_day = _valid_orphan(father_date_of_death=date(2020, 1, 1), date_of_birth=date(2021, 1, 1))
    day_after = _valid_orphan(father_date_of_death=date(2020, 1, 1), date_of_birth=date(2021, 1, 2))
    assert validate_orphan(on_the_day, today=TODAY) == {}
    assert validate_orphan(day_after, today=TODAY) == {"date_of_birth": [GESTATION]}


def test_gestation_window_from_leap_day():
    orphan = _valid_orphan(father_date_of_death=date(2020, 2, 29), date_of_birth=date(2021, 3, 1))
    assert validate_orphan(orphan, today=TODAY) == {"date_of_birth": [GESTATION]}
    orphan.date_of_birth = date(2021, 2, 28)
    assert validate_orphan(orphan, today=TODAY) == {}


@pytest.mark.parametrize("value, message", [(None, BLANK), ("", BLANK), ("Other", NOT_IN_LIST), ("male", NOT_IN_LIST)])
def test_gender(value, message):
    assert validate_orphan(_valid_orphan(gender=value), today=TODAY) == {"gender": [message]}


def test_female_is_accepted():
    assert validate_orphan(_valid_orphan(gender="Female"), today=TODAY) == {}


@pytest.mark.parametrize("value, message", [
    (None, BLANK),
    (-1, NEGATIVE),
    ("-3", NEGATIVE),
    (2.5, NOT_INTEGER),
    ("many", NOT_INTEGER),
    ("--3", NOT_INTEGER),
    ("²", NOT_INTEGER),
    (True, NOT_INTEGER),
])
def test_minor_siblings_count(value, message):
    errors = validate_orphan(_valid_orphan(minor_siblings_count=value), today=TODAY)
    assert errors == {"minor_siblings_count": [message]}


def test_minor_siblings_count_accepts_integer_strings():
    orphan = _valid_orphan(minor_siblings_count="4")
    assert orphan.minor_siblings_count == 4
    assert validate_orphan(orphan, today=TODAY) == {}


@pytest.mark.parametrize("value, message", [(None, BLANK), ("Urgent", NOT_IN_LIST)])
def test_priority(value, message):
    assert validate_orphan(_valid_orphan(priority=value), today=TODAY) == {"priority": [message]}


def test_address_fields_are_validated():
    orphan = _valid_orphan(current_address=Address(city="", neighborhood="Centre"))
    errors = validate_orphan(orphan, today=TODAY)
    assert errors == {"current_address.city": [BLANK], "current_address.province": [BLANK]}


def test_all_failures_are_collected():
    orphan = Orphan()
    errors = validate_orphan(orphan, today=TODAY)
    expected = {
        "name", "father_name", "mother_name", "contact_number",
        "father_is_martyr", "mother_alive", "sponsored_by_another_org",
        "father_date_of_death", "date_of_birth", "gender", "minor_siblings_count",
        "original_address", "current_address", "orphan_status",
        "orphan_sponsorship_status", "orphan_list", "priority",
    }
    assert set(errors) == expected
