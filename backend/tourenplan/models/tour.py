"""
Tourenplan Backend — Tour Model
=================================

What:  ORM model for the `touren` table: one driver's route for one date.
Why:   Stops are grouped and ordered per tour; the tour date feeds the
       photo filename.

Query Patterns:
    - Tour for driver on date: WHERE fahrer_id = :id AND datum = :d
      ORDER BY id LIMIT 1 → idx_touren_fahrer_datum
      A driver is expected to have one tour per date, but nothing enforces
      it (the demo seed creates duplicates), so reads take
      the oldest match.
"""

from datetime import date, datetime, timezone
from typing import List, Optional

from sqlalchemy import TIMESTAMP, Date, ForeignKey, Index, Integer, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourenplan.database import Base


class Tour(Base):
    __tablename__ = "touren"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    fahrer_id: Mapped[int] = mapped_column(
        ForeignKey("fahrer.id", ondelete="CASCADE"),
        nullable=False,
    )

    # Optional; removing a vehicle keeps its tours
    fahrzeug_id: Mapped[Optional[int]] = mapped_column(
        ForeignKey("fahrzeuge.id", ondelete="SET NULL"),
        nullable=True,
    )

    datum: Mapped[date] = mapped_column(Date, nullable=False)
    bemerkung: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    created_at: Mapped[datetime] = mapped_column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        server_default=text("CURRENT_TIMESTAMP"),
    )

    driver: Mapped["Driver"] = relationship(back_populates="tours")
    vehicle: Mapped[Optional["Vehicle"]] = relationship()

    # Not used for reads (those go through the ordering query); present so
    # ORM-level deletes cascade the same way the foreign keys do.
    stops: Mapped[List["Stop"]] = relationship(
        back_populates="tour",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_touren_fahrer_datum", "fahrer_id", "datum"),
    )

    def __repr__(self) -> str:
        return f"<Tour(id={self.id}, fahrer_id={self.fahrer_id}, datum='{self.datum}')>"
