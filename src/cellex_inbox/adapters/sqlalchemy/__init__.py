"""SQLAlchemy adapter – relational key-value storage."""
from cellex_inbox.adapters.sqlalchemy.storage import SqlAlchemyKeyValueStorage

__all__ = ["SqlAlchemyKeyValueStorage"]
