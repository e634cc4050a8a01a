"""
Base Entity
Audit columns shared by most tables. Subclass it and add @table:

    @table("users")
    @dataclass
    class User(BaseEntity):
        name: Optional[str] = None

Persistent field order for User is then: name, id, created_time,
created_by, updated_time, updated_by.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from .markers import primary_key


@dataclass
class BaseEntity:
    """Generated integer key plus creation/update audit columns."""
    id: Optional[int] = primary_key(default=None)
    created_time: Optional[datetime] = None
    created_by: Optional[str] = None
    updated_time: Optional[datetime] = None
    updated_by: Optional[str] = None
