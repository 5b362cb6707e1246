"""
Rabbitry Backend — Application Package Initializer
===================================================

What: Marks the `rabbitry` directory as a Python package.
Who:  Imported by uvicorn (`rabbitry.main:app`), Alembic and pytest.

Layering:

    ┌─────────────────────────────────────┐
    │      Routes (HTTP + validation)     │  ← status codes, path/body parsing
    ├─────────────────────────────────────┤
    │   BreedService (aggregate + tx)     │  ← transactions, breed assembly
    ├─────────────────────────────────────┤
    │      BreedDao (SQL statements)      │  ← one bound statement per call
    ├─────────────────────────────────────┤
    │   Models / Database (persistence)   │  ← tables, engine, sessions
    └─────────────────────────────────────┘

Errors travel upward as exceptions from `rabbitry.exceptions` and are turned
into HTTP responses only by the handlers registered in `rabbitry.main`.
"""

__version__ = "1.0.0"
