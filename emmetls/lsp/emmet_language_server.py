from __future__ import annotations

from typing import TYPE_CHECKING

from pygls.lsp.server import LanguageServer

if TYPE_CHECKING:
    from emmetls.lsp.capabilities.capabilities import CapabilityManager
    from emmetls.lsp.text_sync_manager import TextSyncManager
    from emmetls.workspace.document_store import DocumentStore
    from emmetls.workspace.settings_cache import SettingsCache


class EmmetLanguageServer(LanguageServer):
    """
    Custom Language Server with emmet-specific attributes.

    Attributes:
        document_store: Snapshots of the documents open in the editor
        settings_cache: Per-document client settings
        has_configuration_capability: Client answers workspace/configuration
        has_workspace_folder_capability: Client reports workspace folders
    """

    def __init__(self, name: str, version: str):
        super().__init__(name, version)

        self.capability_manager: CapabilityManager | None = None
        self.text_sync_manager: TextSyncManager | None = None
        self.document_store: DocumentStore | None = None
        self.settings_cache: SettingsCache | None = None

        self.has_configuration_capability = False
        self.has_workspace_folder_capability = False
