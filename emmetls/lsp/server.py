from __future__ import annotations

import string
import uuid

from lsprotocol.types import (
    COMPLETION_ITEM_RESOLVE,
    INITIALIZE,
    INITIALIZED,
    TEXT_DOCUMENT_COMPLETION,
    WORKSPACE_DID_CHANGE_CONFIGURATION,
    WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS,
    CompletionItem,
    CompletionList,
    CompletionOptions,
    CompletionParams,
    DidChangeConfigurationParams,
    DidChangeWorkspaceFoldersParams,
    InitializedParams,
    InitializeParams,
    LogMessageParams,
    MessageType,
    Registration,
    RegistrationParams,
)

from emmetls import __version__
from emmetls.lsp.capabilities.capabilities import CapabilityManager
from emmetls.lsp.emmet_language_server import EmmetLanguageServer
from emmetls.lsp.text_sync_manager import TextSyncManager
from emmetls.workspace.document_store import DocumentStore
from emmetls.workspace.settings_cache import SettingsCache, configuration_fetcher


# Characters that can end an abbreviation while it is being typed
TRIGGER_CHARACTERS = [
    ">", ")", "]", "}", "@", "*", "$", "+",
    *string.ascii_lowercase,
    *string.digits,
]


def apply_client_capabilities(ls: EmmetLanguageServer, params: InitializeParams) -> None:
    """
    Record which optional client features we can rely on.

    Runs inside the initialize request, after pygls has computed the
    server capabilities and before they are sent. pygls always advertises
    workspace folder support; withdraw it when the client has none.
    """
    workspace = params.capabilities.workspace

    ls.has_configuration_capability = bool(workspace and workspace.configuration)
    ls.has_workspace_folder_capability = bool(workspace and workspace.workspace_folders)

    if ls.settings_cache:
        ls.settings_cache.has_configuration_capability = ls.has_configuration_capability

    server_capabilities = getattr(ls.protocol, "server_capabilities", None)
    if (
        not ls.has_workspace_folder_capability
        and server_capabilities is not None
        and server_capabilities.workspace is not None
    ):
        server_capabilities.workspace.workspace_folders = None


def create_server() -> EmmetLanguageServer:
    """
    Creates and returns a configured Language Server instance.

    pygls handles JSON-RPC, the request lifecycle and incremental document
    sync; this wires the emmet-specific state and feature handlers.
    """
    server = EmmetLanguageServer("emmetls", __version__)

    server.text_sync_manager = TextSyncManager(server)
    server.text_sync_manager.register_handlers()

    server.document_store = DocumentStore(server)
    server.settings_cache = SettingsCache(configuration_fetcher(server))
    server.settings_cache.register_text_sync_hooks(server.text_sync_manager)

    server.capability_manager = CapabilityManager(server)
    server.capability_manager.register_all()

    @server.feature(INITIALIZE)
    def initialize(ls: EmmetLanguageServer, params: InitializeParams):
        apply_client_capabilities(ls, params)

    @server.feature(INITIALIZED)
    async def initialized(ls: EmmetLanguageServer, params: InitializedParams):
        if not ls.has_configuration_capability:
            return

        try:
            await ls.client_register_capability_async(
                RegistrationParams(
                    registrations=[
                        Registration(
                            id=str(uuid.uuid4()),
                            method=WORKSPACE_DID_CHANGE_CONFIGURATION,
                        )
                    ]
                )
            )
        except Exception as e:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Error,
                    message=f"Failed to register for configuration changes: {e}",
                )
            )

    @server.feature(WORKSPACE_DID_CHANGE_CONFIGURATION)
    def did_change_configuration(
        ls: EmmetLanguageServer, params: DidChangeConfigurationParams
    ):
        if not ls.settings_cache:
            return

        if ls.has_configuration_capability:
            # Refetched lazily per document
            ls.settings_cache.clear()
        else:
            ls.settings_cache.update_global(params.settings)

    @server.feature(WORKSPACE_DID_CHANGE_WORKSPACE_FOLDERS)
    def did_change_workspace_folders(
        ls: EmmetLanguageServer, params: DidChangeWorkspaceFoldersParams
    ):
        if ls.has_workspace_folder_capability:
            ls.window_log_message(
                LogMessageParams(
                    type=MessageType.Log,
                    message="Workspace folder change event received.",
                )
            )

    @server.feature(
        TEXT_DOCUMENT_COMPLETION,
        CompletionOptions(
            trigger_characters=TRIGGER_CHARACTERS,
            resolve_provider=True,
        ),
    )
    async def completion(ls: EmmetLanguageServer, params: CompletionParams):
        if ls.capability_manager:
            return await ls.capability_manager.handle_completion(params)
        return CompletionList(is_incomplete=False, items=[])

    @server.feature(COMPLETION_ITEM_RESOLVE)
    async def completion_resolve(ls: EmmetLanguageServer, item: CompletionItem):
        if ls.capability_manager:
            return await ls.capability_manager.resolve_completion_item(item)
        return item

    return server
