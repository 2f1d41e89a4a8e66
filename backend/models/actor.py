"""
Actor schema.

Identity and role of the authenticated caller, as resolved by the
upstream auth layer.

Dependencies: pydantic
System role: Caller identity passed into application services
"""

import enum
import uuid

from pydantic import BaseModel, ConfigDict


class UserRole(str, enum.Enum):
    """Marketplace roles."""

    HOMEOWNER = "homeowner"
    MAID = "maid"
    ADMIN = "admin"


class Actor(BaseModel):
    """Authenticated caller."""

    model_config = ConfigDict(frozen=True)

    id: uuid.UUID
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
