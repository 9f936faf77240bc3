"""
Domain exceptions.

Every exception carries a short, non-technical ``user_message`` that handlers can show
as-is. Diagnostic detail goes into the exception args and the logs only.
"""


class QAError(Exception):
    """Base class for errors surfaced to the user."""

    user_message = "Something went wrong. Please try again."

    def __init__(self, detail: str = "", user_message: str | None = None):
        super().__init__(detail or self.__class__.__name__)
        if user_message is not None:
            self.user_message = user_message


class ModerationRejected(QAError):
    """Content failed a moderation rule. The user may edit and retry."""

    def __init__(self, reason: str):
        super().__init__(f"moderation rejected: {reason}", user_message=reason)
        self.reason = reason


class Forbidden(QAError):
    """Wrong actor for a privileged or self-referential operation."""

    user_message = "❌ Access denied."


class NotFound(QAError):
    """Referenced question, answer or session is missing or in the wrong state."""

    user_message = "⌛ This has expired. Please start again."


class AlreadyApproved(QAError):
    """Approval was requested for a question that is already live."""

    user_message = "This question is already approved."


class StoreUnavailable(QAError):
    """The database failed; nothing was partially applied."""

    user_message = "⚠️ Service is temporarily unavailable. Please try again in a moment."
