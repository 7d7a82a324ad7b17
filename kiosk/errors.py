from typing import Optional

class KioskError(Exception):
    """Base class for everything the kiosk client raises."""

class TransportError(KioskError):
    """The request could not be completed.

    Covers unreadable local files, connection/timeout failures, non-200
    responses and responses the server uses to signal failure (no upload
    name, zero expire value).
    """

    def __init__(self, message: str, status_code: Optional[int] = None, url: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.url = url

class MalformedResponseError(KioskError):
    """A 200 response whose body is not the JSON object we expected."""

    def __init__(self, message: str, body: str = ""):
        super().__init__(message)
        self.body = body

class PollTimeoutError(KioskError):
    """Raised when an explicit poll attempt cap runs out."""

    def __init__(self, attempts: int, last_status: Optional[str]):
        super().__init__(f"No final status after {attempts} polls (last status: {last_status})")
        self.attempts = attempts
        self.last_status = last_status
