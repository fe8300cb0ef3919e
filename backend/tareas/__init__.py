"""
Tareas Backend: Application Package Initializer
===============================================

What: Marks the `tareas` directory as a Python package.
Who:  Used by uvicorn (`tareas.main:app`), Alembic and pytest.

Architecture Note:
    ┌─────────────────────────────────────┐
    │   Middleware (edge session guard)   │  ← coarse prefix check
    ├─────────────────────────────────────┤
    │     Routes (pages + /api/tareas)    │  ← HTTP concerns, route guards
    ├─────────────────────────────────────┤
    │   Services (gate, tasks, accounts)  │  ← business rules
    ├─────────────────────────────────────┤
    │  Capabilities (identity, task store)│  ← Supabase Auth / Postgres
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
