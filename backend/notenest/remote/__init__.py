"""Remote backend-as-a-service adapter (auth + notes table)."""
from notenest.remote.base import (
    AuthErrorKind,
    AuthFailure,
    AuthReply,
    RemoteClient,
    RemoteSubscription,
    classify_auth_message,
)

__all__ = [
    "AuthErrorKind",
    "AuthFailure",
    "AuthReply",
    "RemoteClient",
    "RemoteSubscription",
    "classify_auth_message",
]
