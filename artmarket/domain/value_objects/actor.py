"""Authenticated actor identity handed to the core by the caller."""

from dataclasses import dataclass
from typing import Optional

from ..enums import Role


@dataclass(frozen=True)
class Actor:
    """
    Already-authenticated identity of whoever issued the request.

    The core trusts these fields as given and only performs ownership
    and role checks against them.
    """
    profile_id: str
    user_id: Optional[str] = None
    role: Role = Role.CUSTOMER
    email: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    def __str__(self) -> str:
        return f"{self.role.value}:{self.user_id or self.profile_id}"
