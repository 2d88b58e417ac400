"""
Tourenplan Backend — Application Package Initializer
====================================================

What: Marks the `tourenplan` directory as a Python package.
Why:  Enables module imports like `from tourenplan.config import settings`.
Who:  Used implicitly by Python's import system and explicitly by Alembic, pytest, and uvicorn.

Architecture Note:
    The backend follows the same layered split for every resource
    (drivers, vehicles, tours, stops, photos):

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← Ordering, naming, lifecycle rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

    Routes translate HTTP into service calls; services raise application
    exceptions that the global handlers in main.py turn into responses.
"""

__version__ = "1.0.0"
