class DuoError(Exception):
    """Base for errors the CLI reports as a one-line message."""


class NotFoundError(DuoError):
    pass


class ValidationError(DuoError):
    pass


class AuthError(DuoError):
    """Fixed-block edit attempted without the admin PIN."""


class AmbiguousError(DuoError):
    def __init__(self, ref: str, count: int, sample: list[str] | None = None):
        self.ref = ref
        self.count = count
        self.sample = sample or []
        hint = f" ({'; '.join(self.sample)})" if self.sample else ""
        super().__init__(f"'{ref}' matches {count} tasks{hint}, be more specific")
