"""
Storage Module
==============

Template persistence in a key-value area with an index of summaries.

Components:
- backends: In-memory and Redis key-value backends
- template_store: Template store, index maintenance and store factory
"""

from .backends import (
    KeyValueBackend,
    MemoryKeyValueBackend,
    RedisKeyValueBackend,
    StorageError,
)
from .template_store import (
    KeyValueTemplateStore,
    TemplateStore,
    close_template_store,
    get_template_store,
)

__all__ = [
    "KeyValueBackend",
    "MemoryKeyValueBackend",
    "RedisKeyValueBackend",
    "StorageError",
    "KeyValueTemplateStore",
    "TemplateStore",
    "close_template_store",
    "get_template_store",
]
