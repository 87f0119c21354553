"""
TimeTracker Backend - Application Package
==========================================

What: A small CRUD REST API for clients, projects, users and time entries.
How:  Layered the same way in every resource:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP, auth, rate limits
    ├─────────────────────────────────────┤
    │         Services (Resource CRUD)    │  ← lookups, not-found rules
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘

Run with: uvicorn timetracker.main:app
"""

__version__ = "1.0.0"
