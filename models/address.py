from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database import Base


class Address(Base):
    __tablename__ = "addresses"

    id = Column(Integer, primary_key=True)
    city = Column(String(100))
    neighborhood = Column(String(100))
    street = Column(String(255))
    details = Column(String(255))
    province_id = Column(Integer, ForeignKey("provinces.id"))

    orphan_original_address_id = Column(Integer, ForeignKey("orphans.id"))
    orphan_current_address_id = Column(Integer, ForeignKey("orphans.id"))

    province = relationship("Province")

    REQUIRED_FIELDS = ("city", "neighborhood", "province")
