"""Settings repository - key/value storage for tokens, ids and the current task"""
from typing import Any, Optional

from supabase import Client  # type: ignore


class SettingsRepository:
    """
    Key/value store backed by the ``togowl_settings`` table.
    Hides Supabase implementation details from the rest of the application.

    Table layout: ``key text primary key, value jsonb``
    """

    def __init__(self, client: Client, table_name: str = "togowl_settings"):
        self._client = client
        self._table_name = table_name

    async def get(self, key: str) -> Optional[Any]:
        """Find a value by key, None if absent"""
        response = self._client.table(self._table_name).select("value").eq("key", key).execute()

        if not response.data:
            return None

        return response.data[0].get("value")

    async def set(self, key: str, value: Any) -> None:
        """Insert or replace a value"""
        self._client.table(self._table_name).upsert({"key": key, "value": value}).execute()

    async def delete(self, key: str) -> bool:
        """Delete a value by key"""
        response = self._client.table(self._table_name).delete().eq("key", key).execute()
        return len(response.data) > 0
