"""Exception hierarchy for do-client."""


class DOClientError(Exception):
    """Base exception for all do-client errors."""

    pass


class InvalidEndpointError(DOClientError):
    """Raised when the API base URL cannot be parsed."""

    pass


class InvalidTemplateError(DOClientError):
    """Raised when the Spaces endpoint template is malformed."""

    pass


class CredentialsMissingError(DOClientError):
    """Raised when a storage session is requested without both Spaces keys."""

    pass


class StorageSessionError(DOClientError):
    """Raised when a storage session cannot be rendered or constructed."""

    pass


class TransportOrderError(DOClientError):
    """Raised when transport stages are composed in the wrong order."""

    pass
