"""
Settings Cache

Per-document client settings, fetched with workspace/configuration and kept
for as long as the document stays open.

Lifetime:
- opening a document, or the first get_settings(uri), issues one
  configuration request for that URI
- concurrent and later calls share the same pending fetch and result
- textDocument/didClose evicts the entry (see register_text_sync_hooks)
- workspace/didChangeConfiguration drops every entry

A fetch still in flight when its entry is evicted resolves for the callers
already awaiting it; the next access starts a fresh fetch.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from lsprotocol.types import (
    ConfigurationItem,
    ConfigurationParams,
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
)

if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer
    from emmetls.lsp.text_sync_manager import TextSyncManager


# Configuration section requested from the client
SETTINGS_SECTION = "emmetLanguageServer"

DEFAULT_MAX_NUMBER_OF_PROBLEMS = 1000


@dataclass(frozen=True)
class Settings:
    """Client settings for one document."""

    max_number_of_problems: int = DEFAULT_MAX_NUMBER_OF_PROBLEMS

    @classmethod
    def from_dict(cls, raw: Any) -> Settings:
        """Build from the JSON object sent by the client; unknown keys are ignored."""
        if not isinstance(raw, dict):
            return cls()

        value = raw.get("maxNumberOfProblems", DEFAULT_MAX_NUMBER_OF_PROBLEMS)
        if isinstance(value, bool) or not isinstance(value, int):
            value = DEFAULT_MAX_NUMBER_OF_PROBLEMS
        return cls(max_number_of_problems=value)


DEFAULT_SETTINGS = Settings()

SettingsFetcher = Callable[[str], Awaitable[Settings]]


class SettingsCache:
    """Memoized per-URI settings."""

    def __init__(
        self,
        fetch: SettingsFetcher,
        has_configuration_capability: bool = False,
    ) -> None:
        self._fetch = fetch
        self.has_configuration_capability = has_configuration_capability

        # Used when the client cannot answer workspace/configuration
        self.global_settings = DEFAULT_SETTINGS

        self._document_settings: dict[str, asyncio.Future[Settings]] = {}

    async def get_settings(self, uri: str) -> Settings:
        if not self.has_configuration_capability:
            return self.global_settings

        pending = self._document_settings.get(uri)
        if pending is None:
            pending = asyncio.ensure_future(self._fetch(uri))
            self._document_settings[uri] = pending

        try:
            return await pending
        except Exception:
            # Don't memoize failures
            if self._document_settings.get(uri) is pending:
                del self._document_settings[uri]
            raise

    def evict(self, uri: str) -> None:
        self._document_settings.pop(uri, None)

    def clear(self) -> None:
        self._document_settings.clear()

    def update_global(self, raw: Any) -> None:
        """Apply settings pushed by workspace/didChangeConfiguration."""
        if isinstance(raw, dict):
            raw = raw.get(SETTINGS_SECTION)
        self.global_settings = Settings.from_dict(raw)

    def register_text_sync_hooks(self, text_sync: TextSyncManager) -> None:
        text_sync.add_on_open_hook(self._on_document_opened)
        text_sync.add_on_close_hook(self._on_document_closed)

    async def _on_document_opened(self, params: DidOpenTextDocumentParams) -> None:
        await self.get_settings(params.text_document.uri)

    async def _on_document_closed(self, params: DidCloseTextDocumentParams) -> None:
        self.evict(params.text_document.uri)


def configuration_fetcher(server: EmmetLanguageServer) -> SettingsFetcher:
    """Fetch settings for a URI with a workspace/configuration request."""

    async def fetch(uri: str) -> Settings:
        result = await server.workspace_configuration_async(
            ConfigurationParams(
                items=[ConfigurationItem(scope_uri=uri, section=SETTINGS_SECTION)]
            )
        )
        return Settings.from_dict(result[0] if result else None)

    return fetch
