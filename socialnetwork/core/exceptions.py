"""
Domain exceptions for the core redirect handling logic.

These exceptions represent input validation and configuration failures
and are caught by centralized exception handlers in main.py.
"""


class SocialNetworkError(Exception):
    """Base exception for all social network OAuth errors."""

    pass


class RedirectValidationError(SocialNetworkError):
    """
    Raised when a recognized web redirect carries an unusable `state`.

    This indicates a client-side error and should result in a 4xx response.
    """

    pass


class MissingStateError(RedirectValidationError):
    """The `state` parameter is absent."""

    pass


class InvalidStateError(RedirectValidationError):
    """The `state` parameter is not a JSON object of the expected shape."""

    pass


class UnknownProviderError(RedirectValidationError):
    """The provider tag matches no supported provider."""

    pass


class MissingCredentialsError(SocialNetworkError):
    """
    Raised when a provider's credentials are needed but not configured.

    This is a server configuration problem, not a client error.
    """

    pass


class UnsupportedFlowError(SocialNetworkError):
    """Raised when a provider does not offer the requested flow."""

    pass


class ExchangeError(SocialNetworkError):
    """Base exception for authorization code exchange failures."""

    pass


class ExchangeTransportError(ExchangeError):
    """The token endpoint could not be reached."""

    pass


class ExchangeResponseError(ExchangeError):
    """The token endpoint answered with something other than a JSON object."""

    pass
