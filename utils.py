from datetime import date, datetime

DATE_FORMATS = ("%Y-%m-%d", "%Y/%m/%d")


def calculate_age(born: date) -> int:
    today = date.today()
    age = today.year - born.year - ((today.month, today.day) < (born.month, born.day))
    return age


def parse_date(value):
    """Return ``value`` as a ``date`` or ``None`` when it cannot be read as one."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        for fmt in DATE_FORMATS:
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
    return None


def add_one_year(d: date) -> date:
    try:
        return d.replace(year=d.year + 1)
    except ValueError:
        # Feb 29 -> Feb 28
        return d.replace(year=d.year + 1, day=28)
