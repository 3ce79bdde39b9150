from sqlalchemy import Column, Integer, Boolean, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base


class Sponsorship(Base):
    __tablename__ = "sponsorships"

    id = Column(Integer, primary_key=True)
    orphan_id = Column(Integer, ForeignKey("orphans.id"), nullable=False)
    sponsor_id = Column(Integer, ForeignKey("sponsors.id"), nullable=False)

    active = Column(Boolean, default=True)
    start_date = Column(Date)
    end_date = Column(Date)

    orphan = relationship("Orphan", back_populates="sponsorships")
    sponsor = relationship("Sponsor", backref="sponsorships")
