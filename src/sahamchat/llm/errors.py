"""Errors raised by completion clients.

Provider SDK exceptions are translated here into CompletionError carrying a
message that can be shown to the chat user as-is.
"""

MISSING_API_KEY_MESSAGE = "API key tidak ditemukan. Silakan hubungi administrator."
INVALID_API_KEY_MESSAGE = "API key tidak valid. Silakan hubungi administrator."
RATE_LIMITED_MESSAGE = "Terlalu banyak permintaan. Silakan coba lagi dalam beberapa saat."
CONNECTION_MESSAGE = "Koneksi bermasalah. Silakan periksa koneksi internet Anda."
EMPTY_REPLY_MESSAGE = "No response from AI"


class CompletionError(Exception):
    """A completion request failed with a user-presentable message."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


def completion_error_from_status(status_code: int | None, message: str | None = None) -> CompletionError:
    """Map an HTTP status from the completion service to a CompletionError.

    Args:
        status_code: HTTP status returned by the service
        message: Error message provided by the service, if any

    Returns:
        CompletionError with the message to show to the user
    """
    if status_code == 401:
        return CompletionError(INVALID_API_KEY_MESSAGE, status_code)
    if status_code == 429:
        return CompletionError(RATE_LIMITED_MESSAGE, status_code)
    if message:
        return CompletionError(message, status_code)
    return CompletionError(f"API call failed: {status_code}", status_code)
