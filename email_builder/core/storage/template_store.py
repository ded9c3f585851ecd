"""
Template Store
==============

Persistence of template documents in a key-value area with an index of
summaries. Documents are written in the canonical shape and normalized on
read; data failing shape validation is treated as absent.

Key layout:
- ``<prefix>:templates:index``: JSON list of {id, name, updatedAt}
- ``<prefix>:template:<id>``: JSON document
"""

from typing import Any, Callable, List, Optional
from abc import ABC, abstractmethod
from datetime import datetime, timezone
import json
from pydantic import ValidationError

from email_builder.config.logging import get_logger
from email_builder.config.settings import get_settings
from email_builder.core.documents.editor import create_document
from email_builder.core.documents.normalizer import DocumentShapeValidator, normalize_document
from email_builder.core.storage.backends import (
    KeyValueBackend,
    MemoryKeyValueBackend,
    RedisKeyValueBackend,
)
from email_builder.models.schemas import TemplateDocument, TemplateListItem

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TemplateStore(ABC):
    """Abstract base class for template document stores."""

    @abstractmethod
    async def list(self) -> List[TemplateListItem]:
        """List stored templates, most recently saved first."""
        pass

    @abstractmethod
    async def get(self, template_id: str) -> Optional[TemplateDocument]:
        """Load a template, or None when it is missing or malformed."""
        pass

    @abstractmethod
    async def create(self, name: Optional[str] = None) -> TemplateDocument:
        """Create and persist an empty template."""
        pass

    @abstractmethod
    async def save(self, document: TemplateDocument) -> TemplateListItem:
        """Persist a template and refresh its index entry."""
        pass

    @abstractmethod
    async def remove(self, template_id: str) -> None:
        """Delete a template and its index entry."""
        pass


class KeyValueTemplateStore(TemplateStore):
    """Template store over any KeyValueBackend."""

    def __init__(
        self,
        backend: KeyValueBackend,
        key_prefix: str = "oeb",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        self.backend = backend
        self.key_prefix = key_prefix
        self.clock = clock or _utcnow
        self.validator = DocumentShapeValidator()
        self.logger: Any = logger.bind(component="template_store")  # structlog.BoundLoggerBase

    @property
    def index_key(self) -> str:
        return f"{self.key_prefix}:templates:index"

    def template_key(self, template_id: str) -> str:
        return f"{self.key_prefix}:template:{template_id}"

    async def _read_json(self, key: str) -> Any:
        raw = await self.backend.get(key)
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            self.logger.warning("Stored value is not valid JSON", key=key, error=e.msg)
            return None

    async def _read_index(self) -> List[TemplateListItem]:
        parsed = await self._read_json(self.index_key)
        if not isinstance(parsed, list):
            return []

        entries: List[TemplateListItem] = []
        for entry in parsed:
            try:
                entries.append(TemplateListItem.model_validate(entry))
            except ValidationError:
                self.logger.debug("Dropping malformed index entry", entry=entry)
        return entries

    async def _write_index(self, entries: List[TemplateListItem]) -> None:
        payload = [entry.model_dump(by_alias=True) for entry in entries]
        await self.backend.set(self.index_key, json.dumps(payload))

    async def _read_template(self, template_id: str) -> Optional[TemplateDocument]:
        data = await self._read_json(self.template_key(template_id))
        if data is None:
            return None

        errors = self.validator.validate(data)
        if errors:
            self.logger.warning(
                "Stored template failed shape validation",
                template_id=template_id,
                errors=errors[:3],
            )
            return None
        return normalize_document(data)

    async def list(self) -> List[TemplateListItem]:
        entries = await self._read_index()
        valid_entries = [
            entry for entry in entries if await self._read_template(entry.id) is not None
        ]
        valid_entries.sort(key=lambda entry: entry.updated_at_datetime(), reverse=True)
        return valid_entries

    async def get(self, template_id: str) -> Optional[TemplateDocument]:
        return await self._read_template(template_id)

    async def create(self, name: Optional[str] = None) -> TemplateDocument:
        document = create_document(name)
        await self.save(document)
        self.logger.info("Template created", template_id=document.id, name=document.name)
        return document

    async def save(self, document: TemplateDocument) -> TemplateListItem:
        """
        Persist a template in canonical shape.

        Args:
            document: Document to store

        Returns:
            The refreshed index entry

        Raises:
            StorageError: If the backend is unavailable
        """
        await self.backend.set(self.template_key(document.id), json.dumps(document.to_storage()))

        entry = TemplateListItem(
            id=document.id, name=document.name, updated_at=self.clock().isoformat()
        )
        entries = [item for item in await self._read_index() if item.id != document.id]
        entries.append(entry)
        await self._write_index(entries)

        self.logger.info(
            "Template saved", template_id=document.id, instances=len(document.instances)
        )
        return entry

    async def remove(self, template_id: str) -> None:
        await self.backend.delete(self.template_key(template_id))
        entries = [item for item in await self._read_index() if item.id != template_id]
        await self._write_index(entries)
        self.logger.info("Template removed", template_id=template_id)


# Global store instance - created when first needed
_template_store: Optional[TemplateStore] = None


def create_template_store() -> TemplateStore:
    """
    Build a template store for the configured backend.

    Returns:
        TemplateStore instance

    Raises:
        RuntimeError: If the Redis backend is configured but not initialized
    """
    settings = get_settings()
    backend: KeyValueBackend
    if settings.storage_backend == "redis":
        from email_builder.config.database import get_redis_client

        backend = RedisKeyValueBackend(get_redis_client())
    else:
        backend = MemoryKeyValueBackend()

    logger.info("Template store created", backend=settings.storage_backend)
    return KeyValueTemplateStore(backend, key_prefix=settings.store_key_prefix)


def get_template_store() -> TemplateStore:
    """Get the global template store instance."""
    global _template_store
    if _template_store is None:
        _template_store = create_template_store()
    return _template_store


def close_template_store() -> None:
    """Drop the global template store instance."""
    global _template_store
    _template_store = None
