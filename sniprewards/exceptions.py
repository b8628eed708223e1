"""SnipRewards exceptions."""


class SnipRewardsError(Exception):
    """
    Structured exception for loyalty operations.

    Carries a machine-readable ``code``, a user-facing ``message`` and the
    HTTP status the API answers with.

    Usage:
        try:
            salon = resolve_salon_by_owner(owner_id)
        except NotFound:
            ...
        except SnipRewardsError as e:
            return jsonify(e.to_dict()), e.status_code
    """

    status_code = 500
    _default_messages = {}

    def __init__(self, code: str, message: str | None = None, **details):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.details = details
        super().__init__(f"[{code}] {self.message}")

    def to_dict(self) -> dict:
        return {
            "status": "error",
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class NotFound(SnipRewardsError):
    """A single-row lookup matched zero rows."""

    status_code = 404
    _default_messages = {
        "NOT_FOUND": "Record not found",
        "SALON_NOT_FOUND": "Salon not found",
        "PROFILE_NOT_FOUND": "Profile not found",
        "CARD_NOT_FOUND": "Loyalty card not found",
    }

    def __init__(self, code: str = "NOT_FOUND", message: str | None = None, **details):
        super().__init__(code, message, **details)


class StoreError(SnipRewardsError):
    """Any record store failure other than "no rows"."""

    status_code = 500
    _default_messages = {
        "STORE_ERROR": "Something went wrong, please try again",
    }

    def __init__(self, code: str = "STORE_ERROR", message: str | None = None, **details):
        super().__init__(code, message, **details)


class ValidationError(SnipRewardsError):
    """Form constraint violated; raised before any store call."""

    status_code = 400

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__("VALIDATION_ERROR", message, **details)
        self.field = field


class DecodeError(SnipRewardsError):
    """Scanned QR payload could not be turned into an owner identity."""

    MALFORMED = "MALFORMED"
    MISSING_SEGMENT = "MISSING_SEGMENT"

    status_code = 400
    _default_messages = {
        MALFORMED: "Invalid QR code",
        MISSING_SEGMENT: "Invalid QR code",
    }

    def __init__(self, reason: str, payload=None):
        super().__init__(reason, payload=payload)
        self.reason = reason


class CheckinError(SnipRewardsError):
    UNKNOWN_SALON = "UNKNOWN_SALON"
    WRITE_FAILED = "WRITE_FAILED"

    _default_messages = {
        UNKNOWN_SALON: "Invalid QR code or salon not found",
        WRITE_FAILED: "Could not record your visit, please try again",
    }

    def __init__(self, reason: str, message: str | None = None, **details):
        super().__init__(reason, message, **details)
        self.reason = reason
        self.status_code = 404 if reason == self.UNKNOWN_SALON else 500


class AuthError(SnipRewardsError):
    _default_messages = {
        "UNAUTHORIZED": "Authentication required",
        "INVALID_TOKEN": "Invalid or expired token",
        "FORBIDDEN": "You do not have access to this resource",
    }

    def __init__(self, code: str = "UNAUTHORIZED", message: str | None = None, **details):
        super().__init__(code, message, **details)
        self.status_code = 403 if code == "FORBIDDEN" else 401
