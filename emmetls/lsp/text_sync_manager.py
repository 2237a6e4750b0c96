"""
Text Synchronization Manager

Logs document lifecycle notifications and provides hook extension points
so caches can react to documents being opened and closed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable

from lsprotocol.types import (
    DidCloseTextDocumentParams,
    DidOpenTextDocumentParams,
    LogMessageParams,
    MessageType,
    TEXT_DOCUMENT_DID_CLOSE,
    TEXT_DOCUMENT_DID_OPEN,
)

if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer


# Type aliases for hook signatures
OnOpenHook = Callable[[DidOpenTextDocumentParams], Awaitable[None]]
OnCloseHook = Callable[[DidCloseTextDocumentParams], Awaitable[None]]


class TextSyncManager:
    """
    Broadcasts document open/close events to registered hooks.

    The document text itself is kept by pygls: it applies didOpen and
    incremental didChange notifications to ls.workspace before any
    handler here runs.

    - Hooks run in registration order
    - Errors are isolated (one hook failure doesn't affect others)

    Usage:
        text_sync = TextSyncManager(server)
        text_sync.register_handlers()

        settings_cache.register_text_sync_hooks(text_sync)
    """

    def __init__(self, server: EmmetLanguageServer) -> None:
        self.server = server

        self._on_open_hooks: list[OnOpenHook] = []
        self._on_close_hooks: list[OnCloseHook] = []

    def add_on_open_hook(self, hook: OnOpenHook) -> None:
        """
        Register a hook for document open events.

        Args:
            hook: Async function taking DidOpenTextDocumentParams
        """
        self._on_open_hooks.append(hook)

    def add_on_close_hook(self, hook: OnCloseHook) -> None:
        """
        Register a hook for document close events.

        Use for cleanup of per-document state.

        Args:
            hook: Async function taking DidCloseTextDocumentParams

        Example:
            async def on_close(params: DidCloseTextDocumentParams):
                self._entries.pop(params.text_document.uri, None)

            text_sync.add_on_close_hook(on_close)
        """
        self._on_close_hooks.append(hook)

    async def _broadcast(self, event: str, hooks: list, params) -> None:
        for hook in hooks:
            try:
                await hook(params)
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Error in {event} hook {hook.__name__}: "
                                f"{type(e).__name__}: {e}"
                    )
                )

    async def _broadcast_on_open(self, params: DidOpenTextDocumentParams) -> None:
        await self._broadcast("on_open", self._on_open_hooks, params)

    async def _broadcast_on_close(self, params: DidCloseTextDocumentParams) -> None:
        await self._broadcast("on_close", self._on_close_hooks, params)

    def register_handlers(self) -> None:
        """
        Register textDocument/didOpen and textDocument/didClose handlers.

        Call once during server setup, before caches add their hooks.
        """

        @self.server.feature(TEXT_DOCUMENT_DID_OPEN)
        async def did_open(
            ls: EmmetLanguageServer,
            params: DidOpenTextDocumentParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Info,
                    message=f"Document opened: {params.text_document.uri} "
                            f"({params.text_document.language_id})"
                )
            )

            await self._broadcast_on_open(params)

        @self.server.feature(TEXT_DOCUMENT_DID_CLOSE)
        async def did_close(
            ls: EmmetLanguageServer,
            params: DidCloseTextDocumentParams,
        ) -> None:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Info,
                    message=f"Document closed: {params.text_document.uri}"
                )
            )

            await self._broadcast_on_close(params)
