from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from supabase import Client, create_client

from ..config.settings import SupabaseSettings


class SupabaseNotInitializedError(RuntimeError):
    """Raised when the Supabase client is needed but settings are incomplete."""


@dataclass
class SupabaseGateway:
    """Lazily created Supabase client shared by the remote stores."""

    settings: SupabaseSettings
    _client: Optional[Client] = None

    def ensure_client(self) -> Client:
        if self._client is not None:
            return self._client
        if not self.settings.is_configured:
            raise SupabaseNotInitializedError("Supabase settings are missing URL or anon key.")
        self._client = create_client(self.settings.url, self.settings.anon_key)
        return self._client

    def use_client(self, client: Client) -> None:
        self._client = client

    def table(self, name: str):
        return self.ensure_client().table(name)
