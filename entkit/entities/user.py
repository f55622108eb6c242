"""User entity with lookups by email."""

from __future__ import annotations

from typing import Optional

from ..db import get_database
from ..entity import BaseEntity
from ..entity.base import Clock
from ..storage import Record, Table
from .user_schema import USER_FIELDS


class UserEntity(BaseEntity):
    """User entity class with specific business logic."""

    def __init__(self, table: Optional[Table] = None, clock: Optional[Clock] = None) -> None:
        super().__init__("User", USER_FIELDS, table or get_database().users, clock=clock)

    async def find_by_email(self, email: str) -> Optional[Record]:
        """Find user by email."""
        return await self.table.first_where("email", email)

    async def email_exists(self, email: str) -> bool:
        """Check if email already exists."""
        return await self.table.count_where("email", email) > 0


get_user_entity = BaseEntity.create_getter(UserEntity)
get_user_store = BaseEntity.create_store_getter(UserEntity)
