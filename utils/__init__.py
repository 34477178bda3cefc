"""Utility modules for cross-cutting concerns."""

from utils.timezone import now_utc, to_utc, to_timestamp
from utils.user_context import (
    get_current_identity,
    get_current_user_id,
    set_current_identity,
    clear_current_identity,
    identity_context,
)
