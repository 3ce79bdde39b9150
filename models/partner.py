from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from database import Base


class Partner(Base):
    __tablename__ = "partners"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    province_id = Column(Integer, ForeignKey("provinces.id"))

    province = relationship("Province")

    @property
    def province_code(self):
        return self.province.code if self.province else None
