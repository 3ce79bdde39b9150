from sqlalchemy import Column, Integer, String, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base


class OrphanList(Base):
    """An uploaded batch of orphan records received from a partner."""
    __tablename__ = "orphan_lists"

    id = Column(Integer, primary_key=True)
    partner_id = Column(Integer, ForeignKey("partners.id"), nullable=False)
    osra_num = Column(String(20), unique=True)
    orphan_count = Column(Integer, default=0)
    upload_date = Column(Date)

    partner = relationship("Partner", backref="orphan_lists")
