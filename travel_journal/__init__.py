"""
Travel Journal Backend — Application Package
==============================================

Backend for the travel journal web app: users mark countries on a world map
as visited / want-to-visit / not-visited and keep free-text journal entries
about them.

Layers:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns, auth gate
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← journal facade, users, countries
    ├─────────────────────────────────────┤
    │       Models & Schemas (Data)       │  ← SQLAlchemy ORM + Pydantic
    ├─────────────────────────────────────┤
    │        Database (Persistence)       │  ← Async SQLAlchemy sessions
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
