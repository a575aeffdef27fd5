from .permissions import (
    Identity,
    Requirement,
    Decision,
    authorize,
    ensure,
    role_has_scope,
    district_scope,
)

__all__ = [
    "Identity",
    "Requirement",
    "Decision",
    "authorize",
    "ensure",
    "role_has_scope",
    "district_scope",
]
