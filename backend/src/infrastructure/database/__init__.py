from .session import Base, Database, async_session

__all__ = [
    "Base",
    "Database",
    "async_session",
]
