"""
Role -> capability table.

Static configuration loaded once at import time. Routes never look at
the table directly; they go through has_right().
"""
from types import MappingProxyType
from typing import Mapping, FrozenSet

USER = "user"
ADMIN = "admin"

ROLES = (USER, ADMIN)

GET_MOVIES = "getMovies"
VOTE_MOVIES = "voteMovies"
MANAGE_MOVIES = "manageMovies"

ROLE_RIGHTS: Mapping[str, FrozenSet[str]] = MappingProxyType({
    USER: frozenset({GET_MOVIES, VOTE_MOVIES}),
    ADMIN: frozenset({GET_MOVIES, MANAGE_MOVIES}),
})


def has_right(role: str, right: str) -> bool:
    """True when the role grants the capability. Unknown roles grant nothing."""
    return right in ROLE_RIGHTS.get(role, frozenset())
