"""Propagate the authenticated identity through the call stack using contextvars."""

from contextlib import contextmanager
from contextvars import ContextVar
from typing import TYPE_CHECKING
from uuid import UUID

if TYPE_CHECKING:
    from auth.types import Identity

_current_identity: ContextVar["Identity | None"] = ContextVar("current_identity", default=None)


def get_current_identity() -> "Identity":
    """
    Get the caller's identity from context.

    Raises RuntimeError if no identity is set.
    This is fail-fast behavior - if you're in a code path that
    requires an owner and it's not set, that's a bug.
    """
    identity = _current_identity.get()
    if identity is None:
        raise RuntimeError(
            "No user context set. This usually means you're calling "
            "owner-scoped code outside of an authenticated request."
        )
    return identity


def get_current_user_id() -> UUID:
    """Account ID of the current identity. Same failure mode as get_current_identity()."""
    return get_current_identity().account_id


def set_current_identity(identity: "Identity") -> None:
    """
    Set current identity in context.

    Called by auth middleware after validating the bearer token.
    """
    _current_identity.set(identity)


def clear_current_identity() -> None:
    """
    Clear identity context.

    Called by auth middleware after request completes.
    Must be called in finally block to prevent context leakage.
    """
    _current_identity.set(None)


@contextmanager
def identity_context(identity: "Identity"):
    """
    Context manager for temporarily acting as an identity.

    Useful for tests and scripts that operate on behalf of an account.

    Example:
        with identity_context(identity):
            contacts = contact_service.list_all()
    """
    previous = _current_identity.get()
    set_current_identity(identity)
    try:
        yield identity
    finally:
        if previous is None:
            clear_current_identity()
        else:
            set_current_identity(previous)
