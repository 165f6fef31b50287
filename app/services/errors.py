class AccessError(RuntimeError):
    """Recoverable service error raised by the access contract."""

    slug = "error"
    status_code = 400

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message or self.__class__.__name__

    def to_dict(self) -> dict:
        return {"error": self.slug, "code": self.status_code, "message": self.message}


class ValidationError(AccessError):
    """A required field is empty or malformed; nothing was attempted."""

    slug = "validation_error"
    status_code = 400


class AuthorizationError(AccessError):
    """Wrong role, unknown role, or not the owner."""

    slug = "forbidden"
    status_code = 403


class NotFoundError(AccessError):
    slug = "not_found"
    status_code = 404


class InvalidStateError(AccessError):
    """Illegal status transition or a second response for the same feedback."""

    slug = "invalid_state"
    status_code = 409


class StoreError(AccessError):
    """Database failure. The original exception is kept as ``__cause__``."""

    slug = "store_error"
    status_code = 503
