# Routes package init
"""
Tourenplan Backend — API Routes Package
=========================================

Route Inventory:
    - auth.py:    POST /login
    - drivers.py: GET/POST /fahrer, DELETE /fahrer/{id}, GET/POST /fahrzeuge
    - tours.py:   POST /touren, GET /touren/{fahrer_id}/{datum}, DELETE /touren/{id},
                  GET/POST /touren/{id}/stopps, PUT /touren/{id}/reihenfolge
    - stops.py:   PATCH /stopps/{id}, POST /stopps/{id}/erledigt, DELETE /stopps/{id}
    - photos.py:  POST /upload-photo/{stopId}, DELETE /stopps/{id}/foto
    - admin.py:   POST /reset, POST /seed-demo
    - health.py:  GET /health

Routes stay thin: extract request data, call a service, shape the response.
Everything except /login and /health requires a bearer token (deps.py).
"""
