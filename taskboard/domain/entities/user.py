"""Domain entity representing a user."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class User:
    """Attributes needed to address and greet a notification recipient."""

    id: int | None
    name: str
    email: str | None
    is_active: bool = True
    created_at: datetime | None = None

    @property
    def display_name(self) -> str:
        return self.name or "there"
