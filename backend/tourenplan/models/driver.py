"""
Tourenplan Backend — Driver Model
===================================

What:  ORM model for the `fahrer` table.
Why:   Every tour belongs to exactly one driver.
Who:   Created by POST /fahrer or the demo seed; referenced by tours.

The name is unique so the demo seed can find-or-create the canonical
driver with an upsert instead of a check-then-insert race.
"""

from typing import List

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourenplan.database import Base


class Driver(Base):
    """A driver; only the display name is ever mutated."""

    __tablename__ = "fahrer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    # Deleting a driver deletes their tours (and through them, the stops)
    tours: Mapped[List["Tour"]] = relationship(
        back_populates="driver",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Driver(id={self.id}, name='{self.name}')>"
