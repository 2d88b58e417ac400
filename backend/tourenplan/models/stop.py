"""
Tourenplan Backend — Stop Model
=================================

What:  ORM model for the `stopps` table: one delivery location within a tour.
Why:   The stop is where driver progress (status, hint, phone, photo) is
       recorded.
How:   Mutated in place by partial updates, the complete action, and photo
       attachment. The photo is not a separate row: `foto_url` holds the
       public path of the latest upload.

Ordering:
    `reihenfolge` is supplied by the caller on create and never reflowed
    automatically. It is unique per tour in practice only; reads sort by
    (reihenfolge, id) so equal indices still come back in a stable order.

Status Lifecycle:
    pending → arrived | done | skipped
    arrived → pending | done | skipped
    skipped → pending | arrived
    done    → pending                (reopen only)
    An empty stored status (legacy rows) reads as pending.
"""

import enum
from datetime import datetime
from typing import Optional

from sqlalchemy import TIMESTAMP, Float, ForeignKey, Index, Integer, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from tourenplan.database import Base


class StopStatus(str, enum.Enum):
    PENDING = "pending"
    ARRIVED = "arrived"
    DONE = "done"
    SKIPPED = "skipped"

    @classmethod
    def parse(cls, value: Optional[str]) -> "StopStatus":
        """Map a stored or submitted value to a status; empty means pending."""
        if value is None or not value.strip():
            return cls.PENDING
        return cls(value.strip().lower())


# Target states reachable from each state (same-state writes are allowed)
ALLOWED_TRANSITIONS = {
    StopStatus.PENDING: {StopStatus.PENDING, StopStatus.ARRIVED, StopStatus.DONE, StopStatus.SKIPPED},
    StopStatus.ARRIVED: {StopStatus.PENDING, StopStatus.ARRIVED, StopStatus.DONE, StopStatus.SKIPPED},
    StopStatus.DONE: {StopStatus.PENDING, StopStatus.DONE},
    StopStatus.SKIPPED: {StopStatus.PENDING, StopStatus.ARRIVED, StopStatus.SKIPPED},
}


class Stop(Base):
    __tablename__ = "stopps"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    tour_id: Mapped[int] = mapped_column(
        ForeignKey("touren.id", ondelete="CASCADE"),
        nullable=False,
    )

    adresse: Mapped[str] = mapped_column(Text, nullable=False, default="")
    lat: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    lng: Mapped[Optional[float]] = mapped_column(Float, nullable=True)

    # Sequence index within the tour
    reihenfolge: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # ── Customer metadata ─────────────────────────────────────────────────
    kunde: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    kommission: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    telefon: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    hinweis: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # ── Progress ──────────────────────────────────────────────────────────
    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default=StopStatus.PENDING.value,
        server_default=text("'pending'"),
    )
    erledigt_am: Mapped[Optional[datetime]] = mapped_column(TIMESTAMP(timezone=True), nullable=True)
    foto_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    tour: Mapped["Tour"] = relationship(back_populates="stops")

    __table_args__ = (
        Index("idx_stopps_tour_reihenfolge", "tour_id", "reihenfolge"),
    )

    def __repr__(self) -> str:
        return (
            f"<Stop(id={self.id}, tour_id={self.tour_id}, "
            f"reihenfolge={self.reihenfolge}, status='{self.status}')>"
        )
