"""Error taxonomy shared by services and screens."""


class BackofficeError(Exception):
    """Base class for errors surfaced to the operator."""


class AuthenticationError(BackofficeError):
    """Credentials were rejected or the identity backend could not be reached."""


class SubscriptionError(BackofficeError):
    """A live listener failed to attach or lost its connection."""


class MutationError(BackofficeError):
    """A create, update, delete or upload call failed."""


class ValidationError(BackofficeError):
    """A required field was missing; the backend was never contacted."""
