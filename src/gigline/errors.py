"""
Gigline error types: raised by the transport and API layers, caught by the views.
"""

from typing import Any, Optional


class GiglineError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class AuthError(GiglineError):
    def __init__(self, message: str, code: str = "auth_error"):
        super().__init__(code, message)


class ApiError(GiglineError):
    def __init__(self, status_code: int, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("http_error", message, details)
        self.status_code = status_code


class TransportError(GiglineError):
    def __init__(self, message: str):
        super().__init__("transport_error", message)


class AttachmentError(GiglineError):
    def __init__(self, message: str, mime_type: Optional[str] = None):
        super().__init__("attachment_rejected", message, {"mime_type": mime_type})
        self.mime_type = mime_type
