import logging

from sqlalchemy import select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models.sequence import Sequence

logger = logging.getLogger(__name__)


class SequenceGenerator:
    """Hands out strictly increasing integers per entity type.

    The counter is bumped with a single ``UPDATE ... SET last_value = last_value + 1``
    inside the caller's transaction. The row stays write-locked until that
    transaction ends, so concurrent callers are serialized by the database and
    a rolled-back save gives its number back.
    """

    def __init__(self, db: Session):
        self.db = db

    def next(self, entity_type: str) -> int:
        if not self._increment(entity_type):
            try:
                with self.db.begin_nested():
                    self.db.add(Sequence(entity_type=entity_type, last_value=1))
                logger.info("Started sequence for %s", entity_type)
                return 1
            except IntegrityError:
                # another transaction created the row first
                if not self._increment(entity_type):
                    raise

        value = self.db.execute(
            select(Sequence.last_value).where(Sequence.entity_type == entity_type)
        ).scalar_one()
        return int(value)

    def _increment(self, entity_type: str) -> bool:
        result = self.db.execute(
            update(Sequence)
            .where(Sequence.entity_type == entity_type)
            .values(last_value=Sequence.last_value + 1)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1
