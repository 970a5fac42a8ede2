"""Error taxonomy shared by the gateway, the route and the client"""
from typing import Optional

# Start of the NoImageError message for a safety-filtered image. The client
# shows this diagnostic to the user instead of hiding it.
SAFETY_BLOCK_PREFIX = "Image generation was blocked by safety filters"


class MakeoverError(Exception):
    """Base error. ``status_code`` is the HTTP status the route answers with."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(MakeoverError):
    """Malformed client request; the user has to correct the input."""

    status_code = 400


class MethodNotAllowedError(ValidationError):
    status_code = 405


class PayloadTooLargeError(ValidationError):
    status_code = 413


class ConfigurationError(MakeoverError):
    """Missing credential or other operator-fixable setup problem."""


class UpstreamError(MakeoverError):
    """The generative backend call itself failed (network, quota, ...)."""


class ParseError(MakeoverError):
    """The backend returned text that is not the structured output we asked for."""


class NoImageError(MakeoverError):
    """The backend answered without any inline image data."""


class ApiError(Exception):
    """Non-2xx answer from the generate endpoint, as seen by the client."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
