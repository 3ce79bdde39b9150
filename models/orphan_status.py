from sqlalchemy import Column, Integer, String
from database import Base


class OrphanStatus(Base):
    __tablename__ = "orphan_statuses"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)
    code = Column(Integer, unique=True)


class OrphanSponsorshipStatus(Base):
    __tablename__ = "orphan_sponsorship_statuses"

    id = Column(Integer, primary_key=True)
    name = Column(String(50), unique=True, nullable=False)
    code = Column(Integer, unique=True)
