import hmac

from . import config
from .core.errors import AuthError

__all__ = ["require_admin"]


def require_admin(pin: str | None) -> None:
    """Gate for fixed-block edits. Raises AuthError unless `pin` matches."""
    expected = config.get_admin_pin()
    if expected is None:
        raise AuthError("admin is disabled: set admin_pin in config.yaml")
    supplied = (pin or "").strip()
    if not hmac.compare_digest(expected.encode(), supplied.encode()):
        raise AuthError("wrong PIN")
