# Services package init
"""
Tourenplan Backend — Services Layer
=====================================

What:  Business logic layer sitting between routes (HTTP) and database (persistence).
Why:   Routes handle HTTP, services handle the tour/stop rules.
How:   Services receive the request's AsyncSession per call and raise
       application exceptions (see exceptions.py) on failure.

Service Inventory:
    - photo_naming: Pure filename policy for stop photos
    - FileService: Photo file validation, write/overwrite, delete
    - TourService: Drivers, vehicles, tours and the driver/date lookup
    - StopService: Stop creation, ordering, partial updates, status lifecycle
    - PhotoService: Attach/remove photo workflow (lookup → name → write → row)
    - DemoService: Reset and demo seed
    - AuthService: Credential check and bearer token signing/verification
"""
