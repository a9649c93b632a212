"""
Base service layer for unified database operations
"""

import logging
from typing import Dict, Any, List, Optional, Sequence

import asyncpg

from database.connection import get_db_pool
from utils.helpers import parse_identity

logger = logging.getLogger(__name__)

class DatastoreError(RuntimeError):
    """Any driver or pool failure. Never retried, always propagated to the caller"""


class BaseService:
    """Base service providing find/create/update/delete for one table keyed by a UUID"""

    def __init__(self, table_name: str, id_field: str, fields: Sequence[str]):
        self.table_name = table_name
        self.id_field = id_field
        self.fields = list(fields)
        logger.info(f"BaseService initialized for table: {table_name}")

    async def find_all(
        self,
        fields: Optional[List[str]] = None,
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[List[Dict[str, str]]] = None,
        limit: Optional[int] = None
    ) -> List[Dict[str, Any]]:
        """
        Read records from the table

        Args:
            fields: List of fields to select (default: all fields)
            filters: Dictionary of field filters {field_name: value} or {field_name: {"op": "ILIKE", "value": value}}
            order_by: List of ordering specs [{"field": "name", "dir": "asc"}]
            limit: Maximum number of records to return (default: no limit)

        Returns:
            List of row dictionaries
        """
        query, params = self._build_read_query(fields, filters, order_by, limit)
        rows = await self._fetch(query, *params)
        return [dict(row) for row in rows]

    async def find_by_id(self, record_id: Any, fields: Optional[List[str]] = None) -> Optional[Dict[str, Any]]:
        """
        Get a single record by primary key

        Returns None when the record does not exist or record_id is not a valid identity.
        """
        identity = parse_identity(record_id)
        if identity is None:
            return None

        rows = await self.find_all(fields=fields, filters={self.id_field: identity}, limit=1)
        return rows[0] if rows else None

    async def create(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a new record

        Args:
            data: Dictionary of field values to insert

        Returns:
            The inserted row, including its generated identity
        """
        query, params = self._build_insert_query(data)
        row = await self._fetchrow(query, *params, write=True)

        if not row:
            raise DatastoreError(f"Insert into {self.table_name} returned no data")

        return dict(row)

    async def update(self, record_id: Any, data: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Update a record by primary key

        Returns the post-update row, or None when no record has that identity.
        """
        identity = parse_identity(record_id)
        if identity is None:
            return None

        query, params = self._build_update_query(identity, data)
        row = await self._fetchrow(query, *params, write=True)
        return dict(row) if row else None

    async def delete(self, record_id: Any) -> bool:
        """
        Delete a record by primary key

        Returns True when a row was removed.
        """
        identity = parse_identity(record_id)
        if identity is None:
            return False

        query = f"DELETE FROM {self.table_name} WHERE {self.id_field} = $1"
        result = await self._execute(query, identity, write=True)

        # asyncpg returns "DELETE N" where N is the number of rows
        deleted_count = int(result.split()[-1]) if result else 0
        return deleted_count > 0

    async def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        """Count records matching the filters"""
        query = f"SELECT COUNT(*) FROM {self.table_name}"
        params: List[Any] = []
        if filters:
            where_sql, params = self._build_where(filters, 1)
            query += f" WHERE {where_sql}"
        return await self._fetchval(query, *params)

    # Direct SQL execution methods

    def _require_pool(self):
        db_pool = get_db_pool()
        if not db_pool:
            raise DatastoreError("Database pool not initialized")
        return db_pool

    async def _fetch(self, query: str, *params: Any) -> List[Any]:
        db_pool = self._require_pool()
        logger.info(f"Executing READ query: {query}")
        logger.info(f"Parameters: {list(params)}")
        try:
            async with db_pool.acquire() as conn:
                return await conn.fetch(query, *params)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error on {self.table_name}: {e}")
            raise DatastoreError(f"Database query failed: {str(e)}") from e

    async def _fetchrow(self, query: str, *params: Any, write: bool = False) -> Optional[Any]:
        db_pool = self._require_pool()
        logger.info(f"Executing {'WRITE' if write else 'READ'} query: {query}")
        logger.info(f"Parameters: {list(params)}")
        try:
            async with db_pool.acquire() as conn:
                if not write:
                    return await conn.fetchrow(query, *params)
                async with conn.transaction():
                    return await conn.fetchrow(query, *params)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error on {self.table_name}: {e}")
            raise DatastoreError(f"Database query failed: {str(e)}") from e

    async def _fetchval(self, query: str, *params: Any) -> Any:
        db_pool = self._require_pool()
        logger.info(f"Executing READ query: {query}")
        try:
            async with db_pool.acquire() as conn:
                return await conn.fetchval(query, *params)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error on {self.table_name}: {e}")
            raise DatastoreError(f"Database query failed: {str(e)}") from e

    async def _execute(self, query: str, *params: Any, write: bool = False) -> str:
        db_pool = self._require_pool()
        logger.info(f"Executing {'WRITE' if write else 'READ'} query: {query}")
        logger.info(f"Parameters: {list(params)}")
        try:
            async with db_pool.acquire() as conn:
                async with conn.transaction():
                    return await conn.execute(query, *params)
        except asyncpg.PostgresError as e:
            logger.error(f"Database error on {self.table_name}: {e}")
            raise DatastoreError(f"Database query failed: {str(e)}") from e

    # Query builders

    def _build_read_query(
        self,
        fields: Optional[List[str]],
        filters: Optional[Dict[str, Any]],
        order_by: Optional[List[Dict[str, str]]],
        limit: Optional[int]
    ) -> tuple[str, List[Any]]:
        """Build SQL SELECT query"""
        select_fields = ", ".join(fields or self.fields)
        query = f"SELECT {select_fields} FROM {self.table_name}"
        params: List[Any] = []
        param_counter = 1

        if filters:
            where_sql, params = self._build_where(filters, param_counter)
            param_counter += len(params)
            query += f" WHERE {where_sql}"

        if order_by:
            order_parts = [f"{spec['field']} {spec.get('dir', 'asc').upper()}" for spec in order_by]
            query += f" ORDER BY {', '.join(order_parts)}"

        if limit is not None:
            query += f" LIMIT ${param_counter}"
            params.append(limit)

        return query, params

    def _build_insert_query(self, data: Dict[str, Any]) -> tuple[str, List[Any]]:
        """Build SQL INSERT query"""
        field_names = list(data.keys())
        field_placeholders = [f"${i}" for i in range(1, len(field_names) + 1)]
        params = list(data.values())

        # Add created_at if not provided (auto-managed)
        if 'created_at' not in field_names:
            field_names.append('created_at')
            field_placeholders.append('NOW()')

        query = (
            f"INSERT INTO {self.table_name} ({', '.join(field_names)}) "
            f"VALUES ({', '.join(field_placeholders)}) RETURNING *"
        )
        return query, params

    def _build_update_query(self, identity: Any, data: Dict[str, Any]) -> tuple[str, List[Any]]:
        """Build SQL UPDATE query keyed by identity, returning the post-image"""
        set_parts = []
        params: List[Any] = []
        for param_counter, (field_name, value) in enumerate(data.items(), start=1):
            set_parts.append(f"{field_name} = ${param_counter}")
            params.append(value)

        params.append(identity)
        query = (
            f"UPDATE {self.table_name} SET {', '.join(set_parts)} "
            f"WHERE {self.id_field} = ${len(params)} RETURNING *"
        )
        return query, params

    def _build_where(self, filters: Dict[str, Any], param_counter: int) -> tuple[str, List[Any]]:
        """Build WHERE clause SQL; plain values mean equality"""
        where_parts = []
        params: List[Any] = []
        for field_name, filter_spec in filters.items():
            if isinstance(filter_spec, dict):
                op = filter_spec.get("op", "=")
                value = filter_spec.get("value")
            else:
                op = "="
                value = filter_spec

            if op not in ("=", "!=", "ILIKE"):
                raise ValueError(f"Unsupported WHERE operator: {op}")

            where_parts.append(f"{field_name} {op} ${param_counter}")
            params.append(value)
            param_counter += 1

        return " AND ".join(where_parts), params
