# Services package init
"""
Jotter Backend — Services Layer
================================

What:  Business logic layer sitting between routes (HTTP) and stores (persistence).
Why:   Routes handle HTTP, services handle rules, stores handle SQL.

Service Inventory:
    - AuthService: password hashing, login, bearer token verification
    - NoteService: list (with owner join), get, create, update, delete
    - UserService: registration and user listing (with notes join)

Why services are separate from routes:
    1. Testability: Services can be unit-tested with mocked stores
    2. Single responsibility: Routes never decide status codes for failures;
       they let service exceptions reach the handlers in main.py
"""
