"""
Jotter Backend — Application Package Initializer
=================================================

What: Marks the `jotter` directory as a Python package.
Why:  Enables module imports like `from jotter.config import Settings`.
Who:  Used implicitly by Python's import system and explicitly by pytest and uvicorn.

Architecture Note:
    The backend is layered the same way top to bottom:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │      Services (Business Logic)      │  ← Auth, validation, joins
    ├─────────────────────────────────────┤
    │       Stores (Persistence API)      │  ← One store per entity
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Sessions)          │  ← Async SQLAlchemy engine
    └─────────────────────────────────────┘

    Routes translate HTTP into service calls, services hold the rules
    (token checks, defaults, owner joins), and stores are the only code
    that issues SQL.
"""

__version__ = "1.0.0"
