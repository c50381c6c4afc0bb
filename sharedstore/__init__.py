"""
sharedstore: minimal HTTP services over shared backing stores.

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │        Services (user / cache)      │  ← presence checks, error kinds
    ├─────────────────────────────────────┤
    │   Store handles (Database, Cache)   │  ← pooled SQLAlchemy / redis-py
    └─────────────────────────────────────┘

Any number of user-service instances may point at one database; they share
nothing in-process, only rows in the store.
"""

__version__ = "1.0.0"
