from sqlalchemy import Column, Integer, String
from database import Base


class Province(Base):
    __tablename__ = "provinces"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), unique=True, nullable=False)
    code = Column(String(10), unique=True, nullable=False)
