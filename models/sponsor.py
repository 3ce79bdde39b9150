from sqlalchemy import Column, Integer, String, Date
from database import Base


class Sponsor(Base):
    __tablename__ = "sponsors"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    country = Column(String(100))
    contact_number = Column(String(50))
    start_date = Column(Date)
