"""
System catalog access: identity resolution, state reads and ownership.
"""

from .identity import check_exists, resolve_identifier_by_name, wait_for_identifier
from .principals import lookup_usernames, set_owner
from .reader import read_state

__all__ = [
    "check_exists",
    "lookup_usernames",
    "read_state",
    "resolve_identifier_by_name",
    "set_owner",
    "wait_for_identifier",
]
