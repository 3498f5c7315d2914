"""Supabase-backed key-value store."""

from dataclasses import dataclass

from supabase import Client

from nutrisnap.services.storage import KeyValueStore


@dataclass
class SupabaseKeyValueStore(KeyValueStore):
    """Stores string values in a two-column Supabase table."""

    client: Client
    table: str = "kv_store"

    def get(self, key: str) -> str | None:
        """Return the value stored under a key, if present."""
        response = (
            self.client.table(self.table)
            .select("key, value")
            .eq("key", key)
            .limit(1)
            .execute()
        )
        if not response.data:
            return None
        value = response.data[0].get("value")
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        """Insert or overwrite a key."""
        self.client.table(self.table).upsert(
            {"key": key, "value": value}, on_conflict="key"
        ).execute()

    def remove(self, key: str) -> None:
        """Delete a key."""
        self.client.table(self.table).delete().eq("key", key).execute()
