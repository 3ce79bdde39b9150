from sqlalchemy import Column, Integer, String, Date, Boolean, ForeignKey, DateTime
from sqlalchemy.orm import relationship, validates
from database import Base
from datetime import datetime

from models.enums import OrphanStatusName, SponsorshipStatusName, Priority
from models.orphan_status import OrphanStatus, OrphanSponsorshipStatus
from utils import parse_date


class Orphan(Base):
    __tablename__ = "orphans"

    id = Column(Integer, primary_key=True)
    osra_num = Column(String(20), unique=True)
    sequential_id = Column(Integer, unique=True)

    name = Column(String(255))
    father_name = Column(String(255))
    father_is_martyr = Column(Boolean)
    father_date_of_death = Column(Date)
    mother_name = Column(String(255))
    mother_alive = Column(Boolean)
    date_of_birth = Column(Date)
    gender = Column(String(10))
    contact_number = Column(String(50))
    sponsored_by_another_org = Column(Boolean)
    minor_siblings_count = Column(Integer)
    priority = Column(String(10))

    orphan_status_id = Column(Integer, ForeignKey("orphan_statuses.id"))
    orphan_sponsorship_status_id = Column(Integer, ForeignKey("orphan_sponsorship_statuses.id"))
    orphan_list_id = Column(Integer, ForeignKey("orphan_lists.id"))

    orphan_status = relationship("OrphanStatus")
    orphan_sponsorship_status = relationship("OrphanSponsorshipStatus")
    orphan_list = relationship("OrphanList", backref="orphans")

    original_address = relationship(
        "Address",
        foreign_keys="Address.orphan_original_address_id",
        uselist=False,
        cascade="all, delete-orphan",
    )
    current_address = relationship(
        "Address",
        foreign_keys="Address.orphan_current_address_id",
        uselist=False,
        cascade="all, delete-orphan",
    )

    sponsorships = relationship("Sponsorship", back_populates="orphan", cascade="all, delete-orphan")
    sponsors = relationship("Sponsor", secondary="sponsorships", viewonly=True)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Fields a caller may set through create/update data dicts.
    ASSIGNABLE_FIELDS = (
        "name", "father_name", "father_is_martyr", "father_date_of_death",
        "mother_name", "mother_alive", "date_of_birth", "gender",
        "contact_number", "sponsored_by_another_org", "minor_siblings_count",
        "priority",
    )

    @validates("father_date_of_death", "date_of_birth")
    def _coerce_date(self, key, value):
        # unparseable input is kept so that validation can report it
        parsed = parse_date(value)
        return parsed if parsed is not None else value

    @validates("minor_siblings_count")
    def _coerce_count(self, key, value):
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                return value
        return value

    @property
    def full_name(self):
        return " ".join([self.name or "", self.father_name or ""])

    @property
    def partner(self):
        return self.orphan_list.partner if self.orphan_list else None

    def __repr__(self):
        return f"<Orphan id={self.id} osra_num={self.osra_num!r} name={self.full_name!r}>"


def active(query):
    return query.join(Orphan.orphan_status).filter(
        OrphanStatus.name == OrphanStatusName.ACTIVE.value
    )


def unsponsored(query):
    return query.join(Orphan.orphan_sponsorship_status).filter(
        OrphanSponsorshipStatus.name == SponsorshipStatusName.UNSPONSORED.value
    )


def high_priority(query):
    return query.filter(Orphan.priority == Priority.HIGH.value)
