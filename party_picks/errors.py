"""
Error taxonomy for Party Picks.

Every error raised by the services carries the HTTP status and the message
shown to the user, so the blueprints can let them propagate and the global
error handler renders them as JSON.
"""

from sqlalchemy.exc import IntegrityError, OperationalError


class PartyPicksError(Exception):
    """Base class for all domain errors"""

    status_code = 500
    message = "Something went wrong"

    def __init__(self, message=None, **details):
        super().__init__(message or self.message)
        self.message = message or self.message
        self.details = details

    @property
    def code(self):
        return type(self).__name__

    def to_dict(self):
        data = {"error": self.message, "code": self.code}
        if self.details:
            data["details"] = self.details
        return data


class AuthenticationRequired(PartyPicksError):
    status_code = 401
    message = "Not authenticated"


class InvalidInviteCode(PartyPicksError):
    status_code = 404
    message = "Invalid invite code"


class CodeGenerationExhausted(PartyPicksError):
    status_code = 500
    message = "Failed to generate unique invite code"


class ConstraintViolation(PartyPicksError):
    status_code = 409
    message = "The change conflicts with existing data"


class TransientNetwork(PartyPicksError):
    status_code = 503
    message = "Service temporarily unavailable, please try again"


class ValidationFailed(PartyPicksError):
    status_code = 400
    message = "Invalid input"


class UnknownCategory(PartyPicksError):
    status_code = 400
    message = "Unknown category"


class InvalidOption(PartyPicksError):
    status_code = 400
    message = "Invalid option for category"


class PredictionsLocked(PartyPicksError):
    status_code = 403
    message = "Predictions are locked"


class NotPartyMember(PartyPicksError):
    status_code = 403
    message = "Not a member of this party"


class AdminRequired(PartyPicksError):
    status_code = 403
    message = "Admin privileges required"


class OwnershipViolation(PartyPicksError):
    status_code = 403
    message = "Cannot write another user's data"


def is_unique_violation(error, column=None):
    """Check whether an IntegrityError is a uniqueness violation (optionally on a column)"""
    if not isinstance(error, IntegrityError):
        return False

    orig = getattr(error, "orig", None)
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    text = str(orig if orig is not None else error)

    if sqlstate:
        unique = sqlstate == "23505"
    else:
        unique = "UNIQUE constraint failed" in text or "unique" in text.lower()

    if not unique:
        return False
    return column is None or column in text


def translate_store_error(error):
    """Map a SQLAlchemy error to the domain taxonomy"""
    if isinstance(error, IntegrityError):
        return ConstraintViolation(reason=str(getattr(error, "orig", error)))
    if isinstance(error, OperationalError):
        return TransientNetwork()
    return error
