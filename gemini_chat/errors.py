"""
Error types for Gemini Chat services

The proxy raises ChatProxyError subclasses and converts them to a single
failure result at its top-level boundary. The history flow raises the
remaining types, which the routes map to status codes.
"""


class ChatProxyError(Exception):
    """Base class for failures inside the chat proxy"""


class ConfigurationError(ChatProxyError):
    """Required configuration (e.g. the Gemini API key) is missing"""


class AuthorizationError(ChatProxyError):
    """A bearer token was required but not supplied"""


class StorageError(ChatProxyError):
    """Downloading an image from object storage failed"""


class ProviderError(ChatProxyError):
    """The Gemini endpoint answered with a non-2xx status"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"Gemini API error: {status_code} - {body}")


class SupabaseError(Exception):
    """A Supabase REST call failed"""

    def __init__(self, message: str, status_code: int | None = None):
        self.status_code = status_code
        super().__init__(message)


class ValidationError(Exception):
    """User supplied input was rejected before any upstream call"""


class ChatHistoryError(Exception):
    """Sending a message through the history flow failed"""
