"""Session — the principal resolved once per request by the optimistic check.

Invariants:
    - Immutable: passed by value from Handler into Service calls
    - Services never re-derive a Session from the request

Design Decisions:
    - Frozen dataclass over a dict of claims: typed access to user_id/role,
      raw claims kept for features that need more
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping

from crudframe.core.domain_types import Role, UserId


@dataclass(frozen=True)
class Session:
    user_id: UserId
    role: Role = Role.MEMBER
    claims: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN
