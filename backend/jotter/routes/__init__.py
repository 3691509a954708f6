# Routes package init
"""
Jotter Backend — API Routes Package
====================================

Route Inventory:
    - notes.py:   GET/POST       /api/notes
                  GET/PUT/DELETE /api/notes/{id}
    - users.py:   GET/POST       /api/users
    - login.py:   POST           /api/login
    - health.py:  GET            /health

Design Principle:
    Routes are THIN. They pull values out of the request, call a service,
    and return its result. Failures are raised by services and answered by
    the exception handlers registered in main.py.
"""
