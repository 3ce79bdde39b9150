"""
Save pipeline for orphan records.

Stages run in a fixed order on every save:

1. ``apply_defaults``  - fill unset statuses and priority (new records only)
2. ``validate_orphan`` - collect every violated rule per field
3. ``assign_osra_num`` - create path only, once validation passed

``save_orphan`` returns the error map and leaves committing to the caller;
``save_orphan_strict`` raises ``RecordInvalid`` instead.
"""
import logging
from collections import defaultdict
from datetime import date

from sqlalchemy.orm import Session

from models.address import Address
from models.enums import Gender, OrphanStatusName, Priority, SponsorshipStatusName, enum_values
from models.orphan import Orphan
from services.exceptions import OsraNumError, RecordInvalid
from services.sequence import SequenceGenerator
from services.status_lookup import StatusLookup
from utils import add_one_year, parse_date

logger = logging.getLogger(__name__)

BLANK = "can't be blank"
NOT_BOOLEAN = "must be true or false"
NOT_IN_LIST = "is not included in the list"
INVALID_DATE = "is not a valid date"
FUTURE_DATE = "is not a valid date: future dates are not allowed"
NOT_INTEGER = "must be an integer"
NEGATIVE = "must be greater than or equal to 0"
GESTATION = "date of birth must be within the gestation period of father's death"

REQUIRED_TEXT_FIELDS = ("name", "father_name", "mother_name", "contact_number")
BOOLEAN_FIELDS = ("father_is_martyr", "mother_alive", "sponsored_by_another_org")
DATE_FIELDS = ("father_date_of_death", "date_of_birth")
REQUIRED_ASSOCIATIONS = ("orphan_status", "orphan_sponsorship_status", "orphan_list")
ADDRESS_FIELDS = ("original_address", "current_address")

OSRA_NUM_ENTITY = "Orphan"


def _blank(value):
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


# ---------------------------------------------------------------- defaults

def apply_defaults(orphan: Orphan, lookup: StatusLookup):
    if orphan.orphan_status is None:
        orphan.orphan_status = lookup.find(OrphanStatusName.ACTIVE)
    if orphan.orphan_sponsorship_status is None:
        orphan.orphan_sponsorship_status = lookup.find(SponsorshipStatusName.UNSPONSORED)
    if orphan.priority is None:
        orphan.priority = Priority.NORMAL.value
    return orphan


# -------------------------------------------------------------- validation

def _validate_date(errors, field, value, today):
    if _blank(value):
        errors[field].append(BLANK)
        return
    parsed = parse_date(value)
    if parsed is None:
        errors[field].append(INVALID_DATE)
    elif parsed > today:
        errors[field].append(FUTURE_DATE)


def _validate_gestation(errors, orphan):
    father_death = parse_date(orphan.father_date_of_death)
    born = parse_date(orphan.date_of_birth)
    if father_death is None or born is None:
        return
    if add_one_year(father_death) < born:
        errors["date_of_birth"].append(GESTATION)


def _validate_count(errors, value):
    if _blank(value):
        errors["minor_siblings_count"].append(BLANK)
    elif isinstance(value, bool) or not isinstance(value, int):
        errors["minor_siblings_count"].append(NOT_INTEGER)
    elif value < 0:
        errors["minor_siblings_count"].append(NEGATIVE)


def _validate_address(errors, field, address: Address):
    for attr in Address.REQUIRED_FIELDS:
        if _blank(getattr(address, attr)):
            errors[f"{field}.{attr}"].append(BLANK)


def validate_orphan(orphan: Orphan, today: date = None) -> dict:
    """Run every field and cross-field rule and return ``{field: [messages]}``.

    An empty dict means the record is valid.
    """
    today = today or date.today()
    errors = defaultdict(list)

    for field in REQUIRED_TEXT_FIELDS:
        if _blank(getattr(orphan, field)):
            errors[field].append(BLANK)

    for field in BOOLEAN_FIELDS:
        if getattr(orphan, field) not in (True, False):
            errors[field].append(NOT_BOOLEAN)

    for field in DATE_FIELDS:
        _validate_date(errors, field, getattr(orphan, field), today)

    if _blank(orphan.gender):
        errors["gender"].append(BLANK)
    elif orphan.gender not in enum_values(Gender):
        errors["gender"].append(NOT_IN_LIST)

    _validate_count(errors, orphan.minor_siblings_count)

    for field in ADDRESS_FIELDS:
        address = getattr(orphan, field)
        if address is None:
            errors[field].append(BLANK)
        else:
            _validate_address(errors, field, address)

    for field in REQUIRED_ASSOCIATIONS:
        if getattr(orphan, field) is None:
            errors[field].append(BLANK)

    if _blank(orphan.priority):
        errors["priority"].append(BLANK)
    elif orphan.priority not in enum_values(Priority):
        errors["priority"].append(NOT_IN_LIST)

    _validate_gestation(errors, orphan)

    return dict(errors)


# -------------------------------------------------------------- identifier

def province_code_for(orphan: Orphan):
    """orphan_list -> partner -> province -> code, ``None`` when a link is missing."""
    orphan_list = orphan.orphan_list
    if orphan_list is None or orphan_list.partner is None:
        return None
    return orphan_list.partner.province_code


def format_osra_num(province_code: str, sequential_id: int) -> str:
    return f"{province_code}{sequential_id:05d}"


def assign_osra_num(orphan: Orphan, sequence: SequenceGenerator):
    if orphan.osra_num is not None:
        return orphan.osra_num

    province_code = province_code_for(orphan)
    if province_code is None:
        raise OsraNumError("Cannot build an osra_num: orphan list has no partner province")

    orphan.sequential_id = sequence.next(OSRA_NUM_ENTITY)
    orphan.osra_num = format_osra_num(province_code, orphan.sequential_id)
    logger.info("Assigned osra_num %s", orphan.osra_num)
    return orphan.osra_num


# -------------------------------------------------------------------- save

def save_orphan(db: Session, orphan: Orphan, today: date = None, input_errors: dict = None) -> dict:
    """Run the pipeline and stage the record in ``db``.

    Defaults are only filled for new records; an update that clears a field
    fails its presence rule. ``input_errors`` are merged into the result, for
    form values that could not be assigned at all.

    Returns the error map. Nothing is added to the session when it is not
    empty; the caller commits or rolls back.
    """
    is_new = orphan.id is None
    # pending values may not be writable yet (e.g. an unparseable date)
    with db.no_autoflush:
        if is_new:
            apply_defaults(orphan, StatusLookup(db))
        errors = validate_orphan(orphan, today=today)
    for field, messages in (input_errors or {}).items():
        errors[field] = messages + [m for m in errors.get(field, []) if m not in messages]
    if errors:
        logger.warning("Orphan %s failed validation: %s", orphan.id or "(new)", sorted(errors))
        return errors

    if is_new:
        with db.no_autoflush:
            assign_osra_num(orphan, SequenceGenerator(db))
            db.add(orphan)
    db.flush()
    return {}


def save_orphan_strict(db: Session, orphan: Orphan, today: date = None, input_errors: dict = None):
    errors = save_orphan(db, orphan, today=today, input_errors=input_errors)
    if errors:
        raise RecordInvalid(errors)
    return orphan
