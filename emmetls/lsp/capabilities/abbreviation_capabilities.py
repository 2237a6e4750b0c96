"""
Abbreviation completion capability.

Handles textDocument/completion by expanding the emmet abbreviation under
the cursor. Each request runs through fixed stages:

    CLASSIFYING -> EXTRACTING -> EXPANDING -> BUILDING -> REPLIED

Any stage can end in FAILED, which logs the reason to the client and
replies with an empty list. Nothing raises out of complete().
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from lsprotocol.types import (
    CompletionList,
    CompletionParams,
    LogMessageParams,
    MessageType,
)

from emmetls.abbreviation.completion_builder import build
from emmetls.abbreviation.expander import expand, snippet_field
from emmetls.abbreviation.locator import locate
from emmetls.abbreviation.types import ExtractedToken, FieldFormatter, LocateErr
from emmetls.context.grammar_classifier import GrammarClassifier
from emmetls.errors import DocumentNotFound, NoAbbreviationAtCursor
from emmetls.lsp.capabilities.capabilities import CompletionCapability
from emmetls.workspace.document_store import DocumentStore

if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer


class CompletionStage(Enum):
    IDLE = "idle"
    CLASSIFYING = "classifying"
    EXTRACTING = "extracting"
    EXPANDING = "expanding"
    BUILDING = "building"
    REPLIED = "replied"
    FAILED = "failed"


class AbbreviationCompletionCapability(CompletionCapability):
    """Offers the expansion of the abbreviation under the cursor."""

    def __init__(
        self,
        server: EmmetLanguageServer,
        documents: DocumentStore | None = None,
        classifier: GrammarClassifier | None = None,
        field_formatter: FieldFormatter = snippet_field,
    ) -> None:
        super().__init__(server)
        self._documents = documents
        self.classifier = classifier or GrammarClassifier()
        self.field_formatter = field_formatter
        self.stage = CompletionStage.IDLE

    @property
    def name(self) -> str:
        return "abbreviation_completion"

    @property
    def description(self) -> str:
        return "Expand emmet abbreviations in markup and stylesheet documents"

    @property
    def documents(self) -> DocumentStore:
        if self._documents is None:
            self._documents = self.server.document_store or DocumentStore(self.server)
        return self._documents

    async def can_handle(self, params: CompletionParams) -> bool:
        return True

    async def complete(self, params: CompletionParams) -> CompletionList:
        self.stage = CompletionStage.CLASSIFYING
        try:
            uri = params.text_document.uri
            document = self.documents.get(uri)
            if document is None:
                raise DocumentNotFound(uri)

            # Snapshot the line before anything else happens
            line_number = params.position.line
            line = document.line(line_number)

            grammar_kind = self.classifier.classify(document.language_id)

            self.stage = CompletionStage.EXTRACTING
            cursor = document.column_from_client(line, params.position.character)
            located = locate(line, cursor, grammar_kind)
            if isinstance(located, LocateErr):
                return self._fail(NoAbbreviationAtCursor(located.reason))

            # Report the span back in client units
            token = ExtractedToken(
                start_column=document.column_to_client(line, located.token.start_column),
                end_column=document.column_to_client(line, located.token.end_column),
                abbreviation=located.token.abbreviation,
            )

            self.stage = CompletionStage.EXPANDING
            expanded = expand(token.abbreviation, grammar_kind, self.field_formatter)

            self.stage = CompletionStage.BUILDING
            items = build(token, expanded, line_number)

            self.stage = CompletionStage.REPLIED
            return CompletionList(is_incomplete=False, items=items)
        except Exception as e:
            return self._fail(e)

    def _fail(self, error: Exception) -> CompletionList:
        failed_in = self.stage
        self.stage = CompletionStage.FAILED
        self.server.window_log_message(
            LogMessageParams(
                type=MessageType.Log,
                message=f"ERR ({failed_in.value}): {error}",
            )
        )
        return CompletionList(is_incomplete=False, items=[])
