"""
Futelt Backend — Application Package
======================================

What: A small journaling service. Clients post short notes to their future
      selves; the server keeps them and lists them newest first.
Who:  Imported by uvicorn (futelt.main:app), Alembic and pytest.

Layers:

    ┌─────────────────────────────────────┐
    │        Routes (HTTP handlers)       │  ← parse request, call store, serialize
    ├─────────────────────────────────────┤
    │      Schemas (API contract)         │  ← Pydantic request/response models
    ├─────────────────────────────────────┤
    │     Store (MessageStore protocol)   │  ← id assignment, ordering, persistence
    │   in-memory list  |  SQL table      │
    └─────────────────────────────────────┘
"""

__version__ = "0.1.0"
