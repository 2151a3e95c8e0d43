"""
gigline: messaging client for the Gigline booking platform.

Artists, organizers and providers talk to each other through two-party
conversations. This package keeps a local view of those conversations in
step with the REST API.
"""

from gigline.client import Gigline, AsyncGigline
from gigline.auth import Auth
from gigline.session import SessionStore
from gigline.inbox import Inbox
from gigline.thread import ConversationView, ViewState
from gigline.hooks import ViewHooks
from gigline.messages import Endpoints, MessagesAPI
from gigline.errors import GiglineError, AuthError, ApiError, TransportError, AttachmentError

__version__ = "0.1.0"
__all__ = [
    "Gigline",
    "AsyncGigline",
    "Auth",
    "SessionStore",
    "Inbox",
    "ConversationView",
    "ViewState",
    "ViewHooks",
    "Endpoints",
    "MessagesAPI",
    "GiglineError",
    "AuthError",
    "ApiError",
    "TransportError",
    "AttachmentError",
]
