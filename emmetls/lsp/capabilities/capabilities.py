"""
LSP Capabilities Manager

Completion is served by plugins: each CompletionCapability decides whether
it can answer a request and the manager aggregates the items of all that
can. Abbreviation expansion is the only plugin today.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionItem,
    CompletionList,
    CompletionParams,
    LogMessageParams,
    MessageType,
)


if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer


class Capability(ABC):
    """Base class for all LSP capability handlers."""

    def __init__(self, server: EmmetLanguageServer) -> None:
        self.server = server

    def register(self) -> None:
        """
        Hook called once by CapabilityManager.register_all().

        Override to add text sync hooks or extra feature handlers.
        """
        pass

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique name for this capability."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what this capability does."""
        pass

    @abstractmethod
    async def can_handle(self, params) -> bool:
        """Check if the capability can handle the request."""
        pass


class CompletionCapability(Capability):
    """Base class for completion capabilities."""

    @abstractmethod
    async def can_handle(self, params: CompletionParams) -> bool:
        pass

    @abstractmethod
    async def complete(self, params: CompletionParams) -> CompletionList:
        """
        Provide completion items.

        Only called if can_handle() returns True.
        """
        pass

    async def resolve(self, item: CompletionItem) -> CompletionItem:
        """
        Resolve a completion item returned earlier.

        Items are complete when first returned, so the default returns
        the item unchanged.
        """
        return item


class CapabilityManager:
    """
    Central manager for all LSP capabilities.

    Usage:
        manager = CapabilityManager(server)
        manager.register_all()

        items = await manager.handle_completion(params)
    """

    def __init__(
        self,
        server: EmmetLanguageServer,
        capabilities: dict[str, Capability] | None = None,
    ):
        self.server = server

        if capabilities is None:
            from emmetls.lsp.capabilities.abbreviation_capabilities import (
                AbbreviationCompletionCapability,
            )

            capabilities = {
                "abbreviation_completion": AbbreviationCompletionCapability(server),
            }

        self.capabilities = capabilities
        self._registered = False

    def register_all(self) -> None:
        """Register all capabilities with the server."""
        if self._registered:
            return

        for capability in self.capabilities.values():
            capability.register()

        self._registered = True

    def get_capabilities_by_type(self, capability_type: type) -> list[Capability]:
        """Get all capabilities of a specific type (e.g., all CompletionCapability)."""
        return [
            cap
            for cap in self.capabilities.values()
            if isinstance(cap, capability_type)
        ]

    async def handle_completion(self, params: CompletionParams) -> CompletionList:
        """
        Handle completion requests by delegating to capable handlers.

        A failing capability is logged and contributes no items; the
        request is always answered.
        """
        all_items: list[CompletionItem] = []

        for capability in self.get_capabilities_by_type(CompletionCapability):
            try:
                if await capability.can_handle(params):
                    result = await capability.complete(params)  # pyright: ignore
                    all_items.extend(result.items)
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Completion error in {capability.name}: {e}"
                    )
                )

        return CompletionList(is_incomplete=False, items=all_items)

    async def resolve_completion_item(self, item: CompletionItem) -> CompletionItem:
        """Give each completion capability a chance to resolve the item."""
        for capability in self.get_capabilities_by_type(CompletionCapability):
            try:
                item = await capability.resolve(item)  # pyright: ignore
            except Exception as e:
                self.server.window_log_message(
                    LogMessageParams(
                        type=MessageType.Error,
                        message=f"Completion resolve error in {capability.name}: {e}"
                    )
                )

        return item
