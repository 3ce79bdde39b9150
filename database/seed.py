from sqlalchemy.orm import Session

from models import OrphanStatus, OrphanSponsorshipStatus, Province, Sequence
from models.enums import OrphanStatusName, SponsorshipStatusName

DEFAULT_PROVINCES = [
    {"code": "DA", "name": "Damascus & Rif Dimashq"},
    {"code": "AL", "name": "Aleppo"},
    {"code": "HM", "name": "Homs"},
    {"code": "HA", "name": "Hama"},
    {"code": "LA", "name": "Latakia"},
    {"code": "DZ", "name": "Deir Al-Zor"},
    {"code": "DR", "name": "Daraa"},
    {"code": "ID", "name": "Idlib"},
    {"code": "RA", "name": "Ar Raqqah"},
    {"code": "HS", "name": "Al Hasakah"},
    {"code": "TA", "name": "Tartous"},
    {"code": "SU", "name": "Al-Suwayda"},
    {"code": "QU", "name": "Al-Quneitra"},
    {"code": "KR", "name": "Outside Syria"},
]


def add_default_statuses(session: Session):
    for code, name in enumerate(OrphanStatusName, start=1):
        if not session.query(OrphanStatus).filter_by(name=name.value).first():
            session.add(OrphanStatus(name=name.value, code=code))

    for code, name in enumerate(SponsorshipStatusName, start=1):
        if not session.query(OrphanSponsorshipStatus).filter_by(name=name.value).first():
            session.add(OrphanSponsorshipStatus(name=name.value, code=code))
    session.commit()


def add_default_provinces(session: Session):
    for prov in DEFAULT_PROVINCES:
        if not session.query(Province).filter_by(code=prov["code"]).first():
            session.add(Province(code=prov["code"], name=prov["name"]))
    session.commit()


def add_default_sequences(session: Session):
    if not session.get(Sequence, "Orphan"):
        session.add(Sequence(entity_type="Orphan", last_value=0))
    session.commit()


def seed_all(session: Session):
    add_default_statuses(session)
    add_default_provinces(session)
    add_default_sequences(session)
