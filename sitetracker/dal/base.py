"""Generic data-access layer over one document-store collection."""

from typing import Any, Dict, List, Mapping, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from sitetracker.core.exceptions import (
    ConflictException,
    NotFoundException,
    StoreException,
    ValidationException,
)
from sitetracker.core.store import (
    ConditionalCheckFailed,
    DocumentStore,
    InvalidKey,
)

logger = structlog.get_logger()


class BaseDAL:
    """Uniform scan/get/put/update/delete/query operations for one collection.

    Store failures surface as :class:`StoreException`, failed write
    conditions as :class:`ConflictException` and malformed keys as
    :class:`ValidationException`. Each failure is logged at error level
    before it is raised.
    """

    def __init__(self, store: DocumentStore, table_name: str):
        if not table_name:
            raise ValueError("Table name is required")
        self.store = store
        self.table_name = table_name

    def _log_failure(self, operation: str, error: Exception, **context) -> None:
        logger.error(
            "Store operation failed",
            operation=operation,
            table=self.table_name,
            error=str(error),
            error_type=type(error).__name__,
            **context,
        )

    async def scan_all(self) -> List[Dict[str, Any]]:
        logger.debug("Scanning table", operation="scan", table=self.table_name)
        try:
            items = await self.store.scan(self.table_name)
        except SQLAlchemyError as e:
            self._log_failure("scan", e)
            raise StoreException(f"Failed to scan {self.table_name}: {e}")
        logger.debug("Scan finished", table=self.table_name, count=len(items))
        return items

    async def get_by_key(self, key: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        logger.debug("Getting item", operation="get", table=self.table_name, key=dict(key))
        try:
            return await self.store.get_item(self.table_name, key)
        except InvalidKey as e:
            self._log_failure("get", e, key=dict(key))
            raise ValidationException(str(e))
        except SQLAlchemyError as e:
            self._log_failure("get", e, key=dict(key))
            raise StoreException(f"Failed to get item from {self.table_name}: {e}")

    async def put(
        self, item: Mapping[str, Any], condition: Optional[str] = None
    ) -> Dict[str, Any]:
        """Store ``item``; an existing item with the same key is overwritten
        unless ``condition`` says otherwise."""
        logger.debug(
            "Putting item",
            operation="put",
            table=self.table_name,
            item=dict(item),
            condition=condition,
        )
        try:
            return await self.store.put_item(self.table_name, item, condition=condition)
        except ConditionalCheckFailed as e:
            self._log_failure("put", e, item=dict(item))
            raise ConflictException("Data already exists")
        except InvalidKey as e:
            self._log_failure("put", e, item=dict(item))
            raise ValidationException(str(e))
        except SQLAlchemyError as e:
            self._log_failure("put", e, item=dict(item))
            raise StoreException(f"Failed to put item into {self.table_name}: {e}")

    async def update(self, key: Mapping[str, Any], fields: Mapping[str, Any]) -> Dict[str, Any]:
        """Set every field of ``fields`` whose value is not ``None``.

        The key must already exist; a missing item raises
        :class:`NotFoundException` rather than being created.
        """
        updates = {name: value for name, value in fields.items() if value is not None}
        if not updates:
            raise ValidationException("No fields to update")

        logger.debug(
            "Updating item",
            operation="update",
            table=self.table_name,
            key=dict(key),
            updates=updates,
        )
        try:
            return await self.store.update_item(self.table_name, key, updates)
        except ConditionalCheckFailed as e:
            self._log_failure("update", e, key=dict(key))
            raise NotFoundException(f"Item not found in {self.table_name}")
        except InvalidKey as e:
            self._log_failure("update", e, key=dict(key))
            raise ValidationException(str(e))
        except SQLAlchemyError as e:
            self._log_failure("update", e, key=dict(key))
            raise StoreException(f"Failed to update item in {self.table_name}: {e}")

    async def delete(self, key: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        """Remove the item and return its previous value, or ``None`` if absent."""
        logger.debug("Deleting item", operation="delete", table=self.table_name, key=dict(key))
        try:
            return await self.store.delete_item(self.table_name, key)
        except InvalidKey as e:
            self._log_failure("delete", e, key=dict(key))
            raise ValidationException(str(e))
        except SQLAlchemyError as e:
            self._log_failure("delete", e, key=dict(key))
            raise StoreException(f"Failed to delete item from {self.table_name}: {e}")

    async def query_by_partition(
        self,
        partition_value: Any,
        filters: Optional[Mapping[str, Any]] = None,
        sort_key_prefix: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        logger.debug(
            "Querying partition",
            operation="query",
            table=self.table_name,
            partition=partition_value,
            filters=dict(filters) if filters else None,
            sort_key_prefix=sort_key_prefix,
        )
        try:
            return await self.store.query(
                self.table_name,
                partition_value,
                sort_key_prefix=sort_key_prefix,
                filters=filters,
            )
        except InvalidKey as e:
            self._log_failure("query", e, partition=partition_value)
            raise ValidationException(str(e))
        except SQLAlchemyError as e:
            self._log_failure("query", e, partition=partition_value)
            raise StoreException(f"Failed to query {self.table_name}: {e}")
