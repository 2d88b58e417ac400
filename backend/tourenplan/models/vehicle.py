"""Vehicle model (`fahrzeuge`): identity plus license plate."""

from sqlalchemy import Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from tourenplan.database import Base


class Vehicle(Base):
    __tablename__ = "fahrzeuge"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # Natural key for the demo seed's find-or-create
    kennzeichen: Mapped[str] = mapped_column(Text, nullable=False, unique=True)

    def __repr__(self) -> str:
        return f"<Vehicle(id={self.id}, kennzeichen='{self.kennzeichen}')>"
