import logging
from datetime import date

from sqlalchemy.orm import Session, joinedload, selectinload
from sqlalchemy import text, func
from database.connection import SessionLocal
from models import Address, Orphan, OrphanList, Partner, Province, Sponsor, Sponsorship
from models.enums import OrphanStatusName, SponsorshipStatusName
from models.orphan import active, unsponsored, high_priority
from services.exceptions import NotEligibleError, OrphanNotFound, RecordNotFound
from services.orphan_pipeline import NOT_IN_LIST, apply_defaults, save_orphan, save_orphan_strict
from services.status_lookup import StatusLookup

logger = logging.getLogger(__name__)

ADDRESS_ATTRIBUTES = ("city", "neighborhood", "street", "details")
TRUE_VALUES = (True, 1, "1", "true", "True")


def _orphan_options():
    return (
        joinedload(Orphan.orphan_status),
        joinedload(Orphan.orphan_sponsorship_status),
        joinedload(Orphan.orphan_list).joinedload(OrphanList.partner).joinedload(Partner.province),
        joinedload(Orphan.original_address).joinedload(Address.province),
        joinedload(Orphan.current_address).joinedload(Address.province),
        selectinload(Orphan.sponsors),
    )


class DBService:
    """
    Database Service / Repository
    All orphan persistence goes through this class. Every write runs the
    save pipeline (defaults, validation, osra_num) before committing.
    Import it as `from repositories.db_repository import DBService`.
    """
    def __init__(self):
        pass

    def get_db(self) -> Session:
        return SessionLocal()

    def test_connection(self) -> bool:
        try:
            db = self.get_db()
            result = db.execute(text("SELECT 1")).fetchone()
            db.close()
            return result[0] == 1
        except Exception:
            return False

    # ------------------------------------------------------------------
    # building and assigning
    # ------------------------------------------------------------------
    def build_orphan(self, db: Session, data: dict = None):
        """Construct an orphan from form data and fill its defaults.

        Returns (orphan, input_errors) where input_errors holds form values
        that could not be assigned.
        """
        orphan = Orphan()
        # the new orphan is not in the session yet
        with db.no_autoflush:
            input_errors = self._assign_orphan_data(db, orphan, data or {})
            apply_defaults(orphan, StatusLookup(db))
        return orphan, input_errors

    def _assign_orphan_data(self, db: Session, orphan: Orphan, data: dict) -> dict:
        input_errors = {}
        for field in Orphan.ASSIGNABLE_FIELDS:
            if field in data:
                setattr(orphan, field, data[field])

        if "orphan_list_id" in data:
            list_id = data["orphan_list_id"]
            orphan.orphan_list = db.get(OrphanList, list_id) if list_id is not None else None

        if "orphan_status" in data:
            status = data["orphan_status"]
            if status is None:
                orphan.orphan_status = None
            else:
                try:
                    orphan.orphan_status = StatusLookup(db).find(OrphanStatusName(status))
                except ValueError:
                    input_errors["orphan_status"] = [NOT_IN_LIST]

        for field in ("original_address", "current_address"):
            attrs = data.get(f"{field}_attributes")
            if attrs is not None:
                self._assign_address(db, orphan, field, attrs)
        return input_errors

    def _assign_address(self, db: Session, orphan: Orphan, field: str, attrs: dict):
        """Create, update or destroy one of the owned addresses."""
        current = getattr(orphan, field)
        address_id = attrs.get("id")
        if address_id not in (None, ""):
            try:
                address_id = int(address_id)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid address id {address_id!r} for {field}.")
        else:
            address_id = None

        if address_id is not None and (current is None or current.id != address_id):
            raise ValueError(f"Address {address_id} is not the {field} of this orphan.")

        if attrs.get("_destroy") in TRUE_VALUES:
            if current is not None and address_id is not None:
                setattr(orphan, field, None)
            return

        address = current if address_id is not None else Address()
        for name in ADDRESS_ATTRIBUTES:
            if name in attrs:
                setattr(address, name, attrs[name])
        if "province_id" in attrs:
            province_id = attrs["province_id"]
            address.province = db.get(Province, province_id) if province_id is not None else None
        if address is not current:
            setattr(orphan, field, address)

    def _get_orphan(self, db: Session, orphan_id: int) -> Orphan:
        orphan = db.get(Orphan, orphan_id)
        if orphan is None:
            raise OrphanNotFound(f"Orphan {orphan_id} not found")
        return orphan

    # ------------------------------------------------------------------
    # create / update / delete
    # ------------------------------------------------------------------
    def create_orphan(self, data: dict):
        """
        Creates a new orphan in a single transaction.

        Returns (orphan_id, errors). On validation failure orphan_id is None,
        errors maps field name -> list of messages, and nothing is written.
        """
        db = self.get_db()
        try:
            orphan, input_errors = self.build_orphan(db, data)
            errors = save_orphan(db, orphan, input_errors=input_errors)
            if errors:
                db.rollback()
                return None, errors

            orphan_id = orphan.id
            osra_num = orphan.osra_num
            db.commit()
            logger.info("Created orphan %s (%s)", orphan_id, osra_num)
            return orphan_id, {}
        except Exception:
            db.rollback()
            logger.exception("Creating orphan failed")
            raise
        finally:
            db.close()

    def update_orphan(self, orphan_id: int, data: dict) -> dict:
        """
        Updates an orphan's fields and nested addresses.

        osra_num and sequential_id are never taken from data. Returns the
        error map; an empty dict means the update was committed.
        """
        db = self.get_db()
        try:
            orphan = self._get_orphan(db, orphan_id)
            with db.no_autoflush:
                input_errors = self._assign_orphan_data(db, orphan, data)
            errors = save_orphan(db, orphan, input_errors=input_errors)
            if errors:
                db.rollback()
                return errors
            db.commit()
            return {}
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def delete_orphan(self, orphan_id: int) -> bool:
        """Deletes an orphan with its addresses and sponsorship links."""
        db = self.get_db()
        try:
            orphan = db.get(Orphan, orphan_id)
            if orphan is None:
                return False
            db.delete(orphan)
            db.commit()
            logger.info("Deleted orphan %s", orphan_id)
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # ------------------------------------------------------------------
    # status transitions
    # ------------------------------------------------------------------
    def _set_sponsorship_status(self, orphan_id: int, status_name: SponsorshipStatusName):
        db = self.get_db()
        try:
            orphan = self._get_orphan(db, orphan_id)
            orphan.orphan_sponsorship_status = StatusLookup(db).find(status_name)
            save_orphan_strict(db, orphan)
            db.commit()
            logger.info("Orphan %s is now %s", orphan_id, status_name.value)
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def mark_sponsored(self, orphan_id: int):
        """Raises RecordInvalid if the orphan does not pass validation."""
        return self._set_sponsorship_status(orphan_id, SponsorshipStatusName.SPONSORED)

    def mark_unsponsored(self, orphan_id: int):
        """Raises RecordInvalid if the orphan does not pass validation."""
        return self._set_sponsorship_status(orphan_id, SponsorshipStatusName.UNSPONSORED)

    def create_sponsorship(self, orphan_id: int, sponsor_id: int, start_date: date = None) -> int:
        """Links a sponsor to an eligible orphan and marks the orphan sponsored."""
        db = self.get_db()
        try:
            orphan = self._get_orphan(db, orphan_id)
            sponsor = db.get(Sponsor, sponsor_id)
            if sponsor is None:
                raise RecordNotFound(f"Sponsor {sponsor_id} not found")
            if not self._is_eligible(db, orphan_id):
                raise NotEligibleError(f"Orphan {orphan_id} is not eligible for sponsorship.")

            sponsorship = Sponsorship(sponsor=sponsor, start_date=start_date or date.today(), active=True)
            orphan.sponsorships.append(sponsorship)
            orphan.orphan_sponsorship_status = StatusLookup(db).find(SponsorshipStatusName.SPONSORED)
            save_orphan_strict(db, orphan)
            sponsorship_id = sponsorship.id
            db.commit()
            logger.info("Sponsor %s now sponsors orphan %s", sponsor_id, orphan_id)
            return sponsorship_id
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    def end_sponsorship(self, sponsorship_id: int, end_date: date = None) -> bool:
        """Deactivates a sponsorship and marks its orphan unsponsored."""
        db = self.get_db()
        try:
            sponsorship = db.get(Sponsorship, sponsorship_id)
            if sponsorship is None:
                raise RecordNotFound(f"Sponsorship {sponsorship_id} not found")
            sponsorship.active = False
            sponsorship.end_date = end_date or date.today()

            orphan = sponsorship.orphan
            orphan.orphan_sponsorship_status = StatusLookup(db).find(SponsorshipStatusName.UNSPONSORED)
            save_orphan_strict(db, orphan)
            db.commit()
            return True
        except Exception:
            db.rollback()
            raise
        finally:
            db.close()

    # ------------------------------------------------------------------
    # reads
    # ------------------------------------------------------------------
    def get_orphan_details(self, orphan_id: int):
        """Fetch an orphan with statuses, addresses, list/partner and sponsors preloaded."""
        db = self.get_db()
        try:
            orphan = (
                db.query(Orphan)
                .options(*_orphan_options())
                .filter(Orphan.id == orphan_id)
                .first()
            )
            return orphan
        finally:
            db.close()

    def load_orphans(self, active_only=False, unsponsored_only=False, high_priority_only=False):
        """Fetch orphans, optionally narrowed by the active/unsponsored/high priority scopes."""
        db = self.get_db()
        try:
            query = db.query(Orphan)
            if active_only:
                query = active(query)
            if unsponsored_only:
                query = unsponsored(query)
            if high_priority_only:
                query = high_priority(query)
            return query.options(*_orphan_options()).order_by(Orphan.id).all()
        finally:
            db.close()

    def load_eligible_orphans(self):
        return self.load_orphans(active_only=True, unsponsored_only=True)

    def _is_eligible(self, db: Session, orphan_id: int) -> bool:
        query = unsponsored(active(db.query(Orphan.id))).filter(Orphan.id == orphan_id)
        return query.first() is not None

    def eligible_for_sponsorship(self, orphan_id: int) -> bool:
        """True when the orphan is both Active and Unsponsored."""
        db = self.get_db()
        try:
            return self._is_eligible(db, orphan_id)
        finally:
            db.close()

    def search_by_osra_num(self, osra_num: str):
        db = self.get_db()
        try:
            return (
                db.query(Orphan)
                .options(*_orphan_options())
                .filter(Orphan.osra_num == osra_num)
                .first()
            )
        finally:
            db.close()

    def get_summary_counts(self):
        """Return a dict with summary counts: orphans, active, unsponsored, eligible, high_priority."""
        db = self.get_db()
        try:
            total_orphans = db.query(func.count(Orphan.id)).scalar() or 0
            total_active = active(db.query(func.count(Orphan.id))).scalar() or 0
            total_unsponsored = unsponsored(db.query(func.count(Orphan.id))).scalar() or 0
            total_eligible = unsponsored(active(db.query(func.count(Orphan.id)))).scalar() or 0
            total_high = high_priority(db.query(func.count(Orphan.id))).scalar() or 0

            return {
                "orphans": int(total_orphans),
                "active": int(total_active),
                "unsponsored": int(total_unsponsored),
                "eligible": int(total_eligible),
                "high_priority": int(total_high),
            }
        finally:
            db.close()
