class RecordInvalid(Exception):
    """Raised by strict saves when validation fails.

    ``errors`` maps field names to the list of messages collected for them.
    """

    def __init__(self, errors):
        self.errors = dict(errors)
        summary = "; ".join(f"{field} {', '.join(msgs)}" for field, msgs in self.errors.items())
        super().__init__(f"Validation failed: {summary}")


class RecordNotFound(LookupError):
    pass


class OrphanNotFound(RecordNotFound):
    pass


class StatusNotFound(LookupError):
    pass


class OsraNumError(Exception):
    pass


class NotEligibleError(Exception):
    pass
