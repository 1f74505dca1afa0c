"""Remote registration backend."""

from .exceptions import (
    RemoteAuthorizationException,
    RemoteBackendException,
    RemoteConnectionException,
    RemoteDecodeException,
    RemoteResponseException,
)
from .interface import RegistrationBackend
from .supabase_backend import SupabaseBackend

__all__ = [
    "RegistrationBackend",
    "SupabaseBackend",
    "RemoteBackendException",
    "RemoteConnectionException",
    "RemoteAuthorizationException",
    "RemoteResponseException",
    "RemoteDecodeException",
]
