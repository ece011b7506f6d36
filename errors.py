"""
Error types raised while generating alt text.

Every failure the generator can report derives from AltTextError so callers
can catch one type and pick the message to show with user_message().
"""

from config import API_KEY_HELP


class AltTextError(Exception):
    """Base class for all alt text generation failures."""


class EmptyBatchError(AltTextError):
    def __init__(self):
        super().__init__("No images provided")


class ImageLoadError(AltTextError):
    """An image could not be read or decoded."""

    def __init__(self, reason, index=None):
        self.reason = reason
        self.index = index
        super().__init__(f"Failed to load image: {reason}")


class MissingCredentialError(AltTextError):
    def __init__(self, name):
        self.name = name
        super().__init__("API Key not found")


class ApiRequestError(AltTextError):
    """The API answered with a non-success HTTP status."""

    def __init__(self, status_code, body=""):
        self.status_code = status_code
        self.body = body
        message = f"API request failed with status {status_code}"
        if body:
            message += f": {body}"
        super().__init__(message)


class EmptyResponseError(AltTextError):
    """The API answered 200 but the envelope held no usable completion."""

    def __init__(self, detail="No response from API"):
        super().__init__(detail)


class TransportError(AltTextError):
    """The request never produced an HTTP response (timeout, DNS, TLS...)."""

    def __init__(self, reason):
        self.reason = reason
        super().__init__(f"Network error: {reason}")


def with_position(error, index, total):
    """
    Prefix an error message with the image position for multi-image batches.

    Args:
        error (AltTextError): The failure raised for one image
        index (int): 0-based position of the image in the batch
        total (int): Number of images in the batch

    Returns:
        AltTextError: The same error, annotated when total > 1
    """
    if total > 1:
        error.args = (f"Image {index + 1}: {error.args[0]}",) + error.args[1:]
    return error


def user_message(error):
    """Pick the text to show the user for a failed generation."""
    if isinstance(error, MissingCredentialError):
        return API_KEY_HELP
    return str(error)
