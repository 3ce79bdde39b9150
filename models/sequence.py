from sqlalchemy import Column, Integer, String
from database import Base


class Sequence(Base):
    """Last issued sequential id, one row per entity type."""
    __tablename__ = "sequences"

    entity_type = Column(String(50), primary_key=True)
    last_value = Column(Integer, nullable=False, default=0)
