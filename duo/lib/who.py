"""Ingestion boundary for the free-form "who", priority and status values.

Everything read from storage, legacy JSON or the command line passes through
these lookups so the rest of the package only ever sees enum members.
"""

from duo.core.models import Priority, Status, Who

__all__ = ["normalize_priority", "normalize_status", "normalize_who"]

_WHO_ALIASES: dict[str, Who] = {
    "el": Who.SELF,
    "él": Who.SELF,
    "self": Who.SELF,
    "ella": Who.PARTNER,
    "partner": Who.PARTNER,
    "ambos": Who.BOTH,
    "both": Who.BOTH,
    # legacy
    "yo": Who.SELF,
    "pareja": Who.PARTNER,
}

_PRIORITY_ALIASES: dict[str, Priority] = {
    "alta": Priority.HIGH,
    "high": Priority.HIGH,
    "media": Priority.MEDIUM,
    "medium": Priority.MEDIUM,
    "baja": Priority.LOW,
    "low": Priority.LOW,
}

_STATUS_ALIASES: dict[str, Status] = {
    "pendiente": Status.PENDING,
    "pending": Status.PENDING,
    "hecho": Status.DONE,
    "done": Status.DONE,
}


def _token(raw: object) -> str:
    if raw is None:
        return ""
    return str(raw).strip().lower()


def normalize_who(raw: object) -> Who:
    """Map any who-ish value to a Who. Unknown or empty input means both."""
    if isinstance(raw, Who):
        return raw
    return _WHO_ALIASES.get(_token(raw), Who.BOTH)


def normalize_priority(raw: object) -> Priority:
    """Missing -> MEDIUM, unrecognized -> LOW."""
    if isinstance(raw, Priority):
        return raw
    token = _token(raw)
    if not token:
        return Priority.MEDIUM
    return _PRIORITY_ALIASES.get(token, Priority.LOW)


def normalize_status(raw: object) -> Status:
    """Stored tasks are only ever pending or done; FIXED is derived."""
    if raw is Status.DONE:
        return Status.DONE
    return _STATUS_ALIASES.get(_token(raw), Status.PENDING)
