"""Item entity."""

from __future__ import annotations

from typing import Optional

from ..db import get_database
from ..entity import BaseEntity
from ..entity.base import Clock
from ..storage import Table
from .item_schema import ITEM_FIELDS


class ItemEntity(BaseEntity):
    """Item entity class with specific business logic."""

    def __init__(self, table: Optional[Table] = None, clock: Optional[Clock] = None) -> None:
        super().__init__("Item", ITEM_FIELDS, table or get_database().items, clock=clock)


get_item_entity = BaseEntity.create_getter(ItemEntity)
get_item_store = BaseEntity.create_store_getter(ItemEntity)
