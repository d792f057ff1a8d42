from enum import Enum, auto, unique

GENERIC_FAILURE = "Something went wrong on our end, please try again in a moment."


@unique
class VoidlingError(Enum):
    INVALID_TIMEZONE = auto()
    INVALID_FORMAT = auto()
    INVALID_TIME = auto()
    INVALID_DURATION = auto()
    PAST_TIME = auto()
    NOT_LINKED = auto()
    PLAYER_NOT_FOUND = auto()
    COMPETITION_NOT_FOUND = auto()
    EVENT_NOT_FOUND = auto()
    NO_ACTIVE_COMPETITION = auto()
    NO_PARTICIPANTS = auto()
    NO_PROGRESS = auto()
    ALREADY_LINKED = auto()
    ALREADY_REGISTERED = auto()
    EXTERNAL_SERVICE = auto()
    DB_ERROR = auto()


USER_MESSAGES = {
    VoidlingError.INVALID_TIMEZONE: "That isn't a timezone I recognise. Try something like `America/New_York`.",
    VoidlingError.INVALID_FORMAT: "Invalid time format. Please use YYYY-MM-DD HH:MM (e.g., 2025-01-15 20:00)",
    VoidlingError.INVALID_TIME: "Invalid time format. Please use YYYY-MM-DD HH:MM (e.g., 2025-01-15 20:00)",
    VoidlingError.INVALID_DURATION: "Event duration must be a positive number of minutes.",
    VoidlingError.PAST_TIME: "Event time must be in the future!",
    VoidlingError.NOT_LINKED: "You don't have any linked account. Use `/link-rsn` to link your RuneScape account.",
    VoidlingError.PLAYER_NOT_FOUND: "I couldn't find that player on Wise Old Man. Make sure the username is correct and try again.",
    VoidlingError.COMPETITION_NOT_FOUND: "Competition not found. It may have been deleted.",
    VoidlingError.EVENT_NOT_FOUND: "Event not found. It may have been deleted.",
    VoidlingError.NO_ACTIVE_COMPETITION: "There's no active competition of that type ongoing!",
    VoidlingError.NO_PARTICIPANTS: "Sadly there were no participants this time! :(",
    VoidlingError.NO_PROGRESS: "No one made any progress during this competition!",
    VoidlingError.ALREADY_LINKED: "This account is already linked and active!",
    VoidlingError.ALREADY_REGISTERED: "You're already registered for this event!",
    VoidlingError.EXTERNAL_SERVICE: GENERIC_FAILURE,
    VoidlingError.DB_ERROR: GENERIC_FAILURE,
}


class VoidlingException(Exception):
    """Base for every failure a core operation reports to its caller"""

    retryable = False

    def __init__(self, err: VoidlingError, message=None):
        super().__init__(message or err.name)
        self.err = err
        self.message = message

    @property
    def user_message(self) -> str:
        """Text that is safe to show in Discord"""
        return USER_MESSAGES[self.err]


class ValidationError(VoidlingException):
    """Malformed timezone, time or identifier"""


class NotFoundError(VoidlingException):
    """Missing link, competition, event or player"""


class ConflictError(VoidlingException):
    """Already linked or already registered"""


class ExternalServiceError(VoidlingException):
    """Wise Old Man or Discord was unreachable, timed out or rejected the call"""

    retryable = True

    def __init__(self, message=None, status=None):
        super().__init__(VoidlingError.EXTERNAL_SERVICE, message)
        self.status = status


class PersistenceError(VoidlingException):
    """The store transaction failed and was rolled back"""

    retryable = True

    def __init__(self, message=None):
        super().__init__(VoidlingError.DB_ERROR, message)


class PartialSuccessWarning(UserWarning):
    """An external side effect happened but its local bookkeeping did not"""
