"""
ORM models for the four tables of the route tracker.

Importing this package registers every model with ``Base.metadata``
(Alembic autogenerate and ``create_all`` in tests rely on that).
"""

from tourenplan.models.driver import Driver
from tourenplan.models.vehicle import Vehicle
from tourenplan.models.tour import Tour
from tourenplan.models.stop import Stop, StopStatus

__all__ = ["Driver", "Vehicle", "Tour", "Stop", "StopStatus"]
