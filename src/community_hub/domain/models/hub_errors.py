"""Domain errors raised by hub operations.

Every error carries a stable ``code`` that transport adapters forward to clients
(Socket.IO ``hub-error`` notices, HTTP JSON bodies).
"""


class HubError(Exception):
    """Base class for expected, client-reportable hub failures."""

    code = "hub-error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.code)
        self.message = message or self.code


class NotJoinedError(HubError):
    """The connection sent a domain event before joining."""

    code = "not-joined"


class InvalidCallTransitionError(HubError):
    """A signaling message referenced a call in a state that does not allow it."""

    code = "invalid-call-state"


class CallNotFoundError(InvalidCallTransitionError):
    """A signaling message referenced an unknown or already finished call."""

    code = "call-not-found"


class NotCallParticipantError(InvalidCallTransitionError):
    """The connection is not allowed to act on this call."""

    code = "not-call-participant"


class CallerBusyError(HubError):
    """The connection already takes part in a ringing or connected call."""

    code = "caller-busy"


class PostNotFoundError(HubError):
    """The referenced post does not exist."""

    code = "post-not-found"


class InvalidVoteError(HubError):
    """Vote value outside of -1, 0, +1."""

    code = "invalid-vote"


class AlreadyAppliedError(HubError):
    """The applicant already holds a slot on this labour post."""

    code = "already-applied"


class JobFilledError(HubError):
    """No labour slots remain on this post."""

    code = "job-filled"


class LoanNotFoundError(HubError):
    """The referenced loan does not exist."""

    code = "loan-not-found"


class LoanUnavailableError(HubError):
    """The loan was already taken or is otherwise not open for claims."""

    code = "loan-unavailable"
