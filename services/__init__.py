# services package
from .exceptions import RecordInvalid, StatusNotFound, OrphanNotFound, OsraNumError, NotEligibleError
from .orphan_pipeline import apply_defaults, validate_orphan, assign_osra_num, save_orphan, save_orphan_strict

__all__ = [
    'RecordInvalid', 'StatusNotFound', 'OrphanNotFound', 'OsraNumError', 'NotEligibleError',
    'apply_defaults', 'validate_orphan', 'assign_osra_num', 'save_orphan', 'save_orphan_strict',
]
