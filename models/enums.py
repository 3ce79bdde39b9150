import enum


class Gender(enum.Enum):
    MALE = "Male"
    FEMALE = "Female"


class Priority(enum.Enum):
    NORMAL = "Normal"
    HIGH = "High"


class OrphanStatusName(enum.Enum):
    """Stored names of the rows in ``orphan_statuses``."""
    ACTIVE = "Active"
    INACTIVE = "Inactive"
    ON_HOLD = "On Hold"
    UNDER_REVISION = "Under Revision"


class SponsorshipStatusName(enum.Enum):
    """Stored names of the rows in ``orphan_sponsorship_statuses``."""
    UNSPONSORED = "Unsponsored"
    SPONSORED = "Sponsored"
    PREVIOUSLY_SPONSORED = "Previously Sponsored"
    ON_HOLD = "On Hold"


def enum_values(enum_cls):
    return [member.value for member in enum_cls]
