import logging

from sqlalchemy.orm import Session

from models.enums import OrphanStatusName, SponsorshipStatusName
from models.orphan_status import OrphanStatus, OrphanSponsorshipStatus
from services.exceptions import StatusNotFound

logger = logging.getLogger(__name__)

STATUS_MODELS = {
    OrphanStatusName: OrphanStatus,
    SponsorshipStatusName: OrphanSponsorshipStatus,
}


class StatusLookup:
    """Resolves status enum variants to their stored rows within one session."""

    def __init__(self, db: Session):
        self.db = db
        self._cache = {}

    def find(self, variant):
        model = STATUS_MODELS.get(type(variant))
        if model is None:
            raise TypeError(f"{variant!r} is not a status name")
        if variant in self._cache:
            return self._cache[variant]

        row = self.db.query(model).filter(model.name == variant.value).first()
        if row is None:
            logger.error("%s row named %r is missing", model.__name__, variant.value)
            raise StatusNotFound(f"{model.__name__} '{variant.value}' not found")
        self._cache[variant] = row
        return row
