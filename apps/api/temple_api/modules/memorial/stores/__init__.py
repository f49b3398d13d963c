from .base import InstanceRecord, InstanceStore
from .memory_store import InMemoryInstanceStore
from .sql_store import SqlInstanceStore

__all__ = ["InstanceRecord", "InstanceStore", "InMemoryInstanceStore", "SqlInstanceStore"]
