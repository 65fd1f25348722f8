"""Key-value document store on top of SQLAlchemy.

Every collection lives in the shared ``documents`` table. An item is a JSON
document addressed by a two-part key (partition key + sort key); the names of
the key attributes are declared per collection with a :class:`KeySchema`.

The store mirrors the operations of a typical document database client:
``get_item``, ``put_item``, ``update_item``, ``delete_item``, ``scan`` and
``query`` (by partition). Puts and deletes may carry an ``attribute_exists`` or
``attribute_not_exists`` condition; a failed condition raises
:class:`ConditionalCheckFailed`.

A new session is opened for every operation, so one store instance can be
shared by concurrent requests.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Tuple

import structlog
from sqlalchemy import delete, select, text
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sitetracker.core.database import Base
from sitetracker.models.document import Document

logger = structlog.get_logger()

ATTRIBUTE_EXISTS = "attribute_exists"
ATTRIBUTE_NOT_EXISTS = "attribute_not_exists"
_CONDITIONS = (ATTRIBUTE_EXISTS, ATTRIBUTE_NOT_EXISTS)

# Width used to zero-pad numeric key values so they sort numerically.
_NUMERIC_KEY_WIDTH = 20


class ConditionalCheckFailed(Exception):
    """A conditional write found the item in the wrong state."""


class InvalidKey(ValueError):
    """A key is missing attributes or does not match the collection schema."""


@dataclass(frozen=True)
class KeySchema:
    """Names of the attributes forming an item's key."""

    partition_key: str
    sort_key: str
    numeric: bool = False

    @property
    def attributes(self) -> Tuple[str, str]:
        return (self.partition_key, self.sort_key)


class DocumentStore:
    """Document store client."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._schemas: Dict[str, KeySchema] = {}

    def register(self, collection: str, schema: KeySchema) -> None:
        """Declare the key schema of ``collection``."""
        self._schemas[collection] = schema

    def key_schema(self, collection: str) -> KeySchema:
        try:
            return self._schemas[collection]
        except KeyError:
            raise InvalidKey(f"Unknown collection: {collection}")

    @property
    def collections(self) -> List[str]:
        return list(self._schemas)

    def _encode_value(self, schema: KeySchema, name: str, value: Any) -> str:
        if value is None or value == "":
            raise InvalidKey(f"Key attribute '{name}' is required")
        if schema.numeric:
            try:
                number = int(value)
            except (TypeError, ValueError):
                raise InvalidKey(f"Key attribute '{name}' must be an integer")
            if number < 0:
                raise InvalidKey(f"Key attribute '{name}' must not be negative")
            return str(number).zfill(_NUMERIC_KEY_WIDTH)
        return str(value)

    def _encode_key(self, collection: str, key: Mapping[str, Any]) -> Tuple[str, str]:
        schema = self.key_schema(collection)
        return (
            self._encode_value(schema, schema.partition_key, key.get(schema.partition_key)),
            self._encode_value(schema, schema.sort_key, key.get(schema.sort_key)),
        )

    @staticmethod
    def _check_condition(condition: Optional[str], row: Optional[Document]) -> None:
        if condition is None:
            return
        if condition not in _CONDITIONS:
            raise ValueError(f"Unsupported condition: {condition}")
        if condition == ATTRIBUTE_EXISTS and row is None:
            raise ConditionalCheckFailed("The conditional request failed: item does not exist")
        if condition == ATTRIBUTE_NOT_EXISTS and row is not None:
            raise ConditionalCheckFailed("The conditional request failed: item already exists")

    async def get_item(self, collection: str, key: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Return the item stored under ``key`` or ``None``."""
        partition, sort = self._encode_key(collection, key)
        async with self._session_factory() as session:
            row = await session.get(Document, (collection, partition, sort))
            return dict(row.attributes) if row is not None else None

    async def put_item(
        self,
        collection: str,
        item: Mapping[str, Any],
        condition: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Store ``item``, replacing any item with the same key."""
        partition, sort = self._encode_key(collection, item)
        attributes = dict(item)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    row = await session.get(Document, (collection, partition, sort))
                    self._check_condition(condition, row)
                    if row is None:
                        session.add(
                            Document(
                                collection=collection,
                                partition_key=partition,
                                sort_key=sort,
                                attributes=attributes,
                            )
                        )
                    else:
                        row.attributes = attributes
        except IntegrityError:
            # Another writer inserted the same key between our read and insert.
            raise ConditionalCheckFailed("The conditional request failed: item already exists")
        return attributes

    async def update_item(
        self,
        collection: str,
        key: Mapping[str, Any],
        updates: Mapping[str, Any],
    ) -> Dict[str, Any]:
        """Set the named attributes of an existing item and return the full
        item after the update.

        A missing item raises :class:`ConditionalCheckFailed`; updates never
        create items.
        """
        schema = self.key_schema(collection)
        for name in schema.attributes:
            if name in updates:
                raise InvalidKey(f"Key attribute '{name}' cannot be updated")

        partition, sort = self._encode_key(collection, key)
        async with self._session_factory() as session:
            async with session.begin():
                row = await session.get(Document, (collection, partition, sort))
                self._check_condition(ATTRIBUTE_EXISTS, row)
                attributes = dict(row.attributes)
                attributes.update(updates)
                row.attributes = attributes
        return attributes

    async def delete_item(
        self,
        collection: str,
        key: Mapping[str, Any],
        condition: Optional[str] = None,
    ) -> Optional[Dict[str, Any]]:
        """Remove the item under ``key`` and return its previous attributes."""
        partition, sort = self._encode_key(collection, key)
        async with self._session_factory() as session:
            async with session.begin():
                row = await session.get(Document, (collection, partition, sort))
                self._check_condition(condition, row)
                if row is None:
                    return None
                previous = dict(row.attributes)
                await session.delete(row)
        return previous

    async def scan(self, collection: str) -> List[Dict[str, Any]]:
        """Return every item of ``collection``."""
        self.key_schema(collection)
        async with self._session_factory() as session:
            result = await session.execute(
                select(Document.attributes)
                .where(Document.collection == collection)
                .order_by(Document.partition_key, Document.sort_key)
            )
            return [dict(attributes) for attributes in result.scalars().all()]

    async def query(
        self,
        collection: str,
        partition_value: Any,
        sort_key_prefix: Optional[str] = None,
        filters: Optional[Mapping[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Return the items sharing a partition key, ordered by sort key.

        ``sort_key_prefix`` narrows the key condition the way ``begins_with``
        does; ``filters`` is applied to the matched items as attribute
        equality checks.
        """
        schema = self.key_schema(collection)
        partition = self._encode_value(schema, schema.partition_key, partition_value)
        statement = select(Document.attributes).where(
            Document.collection == collection,
            Document.partition_key == partition,
        )
        if sort_key_prefix:
            statement = statement.where(Document.sort_key.startswith(sort_key_prefix, autoescape=True))

        async with self._session_factory() as session:
            result = await session.execute(statement.order_by(Document.sort_key))
            items = [dict(attributes) for attributes in result.scalars().all()]

        if filters:
            items = [
                item for item in items
                if all(item.get(name) == value for name, value in filters.items())
            ]
        return items

    async def clear(self, collection: str) -> int:
        """Delete every item of ``collection`` and return how many were removed."""
        async with self._session_factory() as session:
            async with session.begin():
                result = await session.execute(
                    delete(Document).where(Document.collection == collection)
                )
        return result.rowcount or 0

    async def ping(self) -> None:
        """Round-trip to the store; raises if it is unreachable."""
        async with self._session_factory() as session:
            await session.execute(text("SELECT 1"))

    async def create_tables(self) -> None:
        """Create the backing table if it does not exist."""
        async with self._session_factory() as session:
            connection = await session.connection()
            await connection.run_sync(Base.metadata.create_all)
            await session.commit()
        logger.info("Document store initialized", collections=self.collections)
