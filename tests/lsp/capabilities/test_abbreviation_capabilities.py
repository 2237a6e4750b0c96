"""
Tests for emmetls/lsp/capabilities/abbreviation_capabilities.py

Runs the whole completion pipeline against a fake document store.
"""
from __future__ import annotations

import re
from unittest.mock import Mock

import pytest
from lsprotocol.types import (
    CompletionList,
    CompletionParams,
    InsertTextFormat,
    LogMessageParams,
    Position,
    Range,
    TextDocumentIdentifier,
)

from emmetls.abbreviation import expander
from emmetls.lsp.capabilities.abbreviation_capabilities import (
    AbbreviationCompletionCapability,
    CompletionStage,
)
from emmetls.workspace.document_store import DocumentSnapshot


class FakeDocumentStore:
    """In-memory stand-in for DocumentStore."""

    def __init__(self) -> None:
        self.documents: dict[str, DocumentSnapshot] = {}

    def set(self, uri: str, language_id: str, text: str) -> None:
        self.documents[uri] = DocumentSnapshot(uri, language_id, 1, text)

    def get(self, uri: str) -> DocumentSnapshot | None:
        return self.documents.get(uri)


# --- Fixtures ---

@pytest.fixture
def server() -> Mock:
    server = Mock()
    server.window_log_message = Mock()
    return server


@pytest.fixture
def documents() -> FakeDocumentStore:
    return FakeDocumentStore()


@pytest.fixture
def capability(server: Mock, documents: FakeDocumentStore) -> AbbreviationCompletionCapability:
    return AbbreviationCompletionCapability(server, documents=documents)


def completion_params(uri: str, line: int, character: int) -> CompletionParams:
    return CompletionParams(
        text_document=TextDocumentIdentifier(uri=uri),
        position=Position(line=line, character=character),
    )


def logged_messages(server: Mock) -> list[str]:
    return [
        call.args[0].message
        for call in server.window_log_message.call_args_list
        if isinstance(call.args[0], LogMessageParams)
    ]


# ============================================================================
# Successful expansions
# ============================================================================

class TestMarkupCompletion:

    @pytest.mark.asyncio
    async def test_nested_elements(self, capability, documents):
        documents.set("file:///index.html", "html", "div>p")

        result = await capability.complete(completion_params("file:///index.html", 0, 5))

        assert isinstance(result, CompletionList)
        assert len(result.items) == 1
        item = result.items[0]
        assert item.label == "div>p"
        assert item.insert_text_format == InsertTextFormat.Snippet
        assert item.text_edit.range == Range(
            start=Position(line=0, character=0),
            end=Position(line=0, character=5),
        )
        text = item.text_edit.new_text
        assert text.index("<div>") < text.index("<p>") < text.index("</div>")
        assert re.search(r"<p>\$\{\d+\}</p>", text)
        assert item.documentation == text
        assert capability.stage == CompletionStage.REPLIED

    @pytest.mark.asyncio
    async def test_range_is_on_request_line(self, capability, documents):
        documents.set("file:///app.tsx", "typescriptreact", "return (\n    ul>li\n);")

        result = await capability.complete(completion_params("file:///app.tsx", 1, 9))

        edit_range = result.items[0].text_edit.range
        assert edit_range.start == Position(line=1, character=4)
        assert edit_range.end == Position(line=1, character=9)
        assert "<li>" in result.items[0].text_edit.new_text

    @pytest.mark.asyncio
    async def test_injected_field_formatter(self, server, documents):
        capability = AbbreviationCompletionCapability(
            server,
            documents=documents,
            field_formatter=lambda index, default: f"$${index}",
        )
        documents.set("file:///index.html", "html", "p")

        result = await capability.complete(completion_params("file:///index.html", 0, 1))

        text = result.items[0].text_edit.new_text
        assert "${" not in text
        assert re.search(r"<p>\$\$\d+</p>", text)


class TestStylesheetCompletion:

    @pytest.mark.asyncio
    async def test_property_with_value(self, capability, documents):
        documents.set("file:///style.css", "css", "m10")

        result = await capability.complete(completion_params("file:///style.css", 0, 3))

        item = result.items[0]
        assert item.label == "m10"
        assert "margin: 10px;" in item.text_edit.new_text
        assert item.text_edit.range == Range(
            start=Position(line=0, character=0),
            end=Position(line=0, character=3),
        )

    @pytest.mark.asyncio
    async def test_crlf_document(self, capability, documents):
        documents.set("file:///style.css", "css", "a {\r\n  p10\r\n}")

        result = await capability.complete(completion_params("file:///style.css", 1, 5))

        assert "padding: 10px" in result.items[0].text_edit.new_text
        assert result.items[0].text_edit.range.start == Position(line=1, character=2)

    @pytest.mark.asyncio
    async def test_unlisted_language_expands_as_stylesheet(self, capability, documents):
        documents.set("file:///style.scss", "scss", "m10")

        result = await capability.complete(completion_params("file:///style.scss", 0, 3))

        assert "margin: 10px;" in result.items[0].text_edit.new_text


# ============================================================================
# Client position encoding
# ============================================================================

class TestClientColumns:
    """Positions are exchanged in UTF-16 code units."""

    @pytest.mark.asyncio
    async def test_emoji_before_abbreviation(self, capability, documents):
        documents.set("file:///index.html", "html", "<p>\U0001F600 div")

        # "div" ends at UTF-16 column 9 (the emoji takes two units)
        result = await capability.complete(completion_params("file:///index.html", 0, 9))

        item = result.items[0]
        assert item.label == "div"
        assert item.text_edit.range == Range(
            start=Position(line=0, character=6),
            end=Position(line=0, character=9),
        )
        assert item.data["range"]["start"]["character"] == 6
        assert item.data["range"]["end"]["character"] == 9

    @pytest.mark.asyncio
    async def test_emoji_in_stylesheet_line(self, capability, documents):
        documents.set("file:///style.css", "css", "/* \U0001F600 */ m10")

        result = await capability.complete(completion_params("file:///style.css", 0, 12))

        edit_range = result.items[0].text_edit.range
        assert (edit_range.start.character, edit_range.end.character) == (9, 12)
        assert "margin: 10px;" in result.items[0].text_edit.new_text


# ============================================================================
# Failures become an empty list
# ============================================================================

class TestFailures:

    @pytest.mark.asyncio
    async def test_empty_line(self, capability, documents, server):
        documents.set("file:///index.html", "html", "")

        result = await capability.complete(completion_params("file:///index.html", 0, 0))

        assert result.items == []
        assert capability.stage == CompletionStage.FAILED
        messages = logged_messages(server)
        assert len(messages) == 1
        assert "no abbreviation at cursor" in messages[0]
        assert "extracting" in messages[0]

    @pytest.mark.asyncio
    async def test_unknown_document(self, capability, server):
        result = await capability.complete(completion_params("file:///missing.html", 0, 0))

        assert result.items == []
        assert "failed to find document file:///missing.html" in logged_messages(server)[0]

    @pytest.mark.asyncio
    async def test_line_past_end_of_document(self, capability, documents):
        documents.set("file:///index.html", "html", "div")

        result = await capability.complete(completion_params("file:///index.html", 5, 3))

        assert result.items == []

    @pytest.mark.asyncio
    async def test_engine_failure(self, capability, documents, server, monkeypatch):
        def broken(abbreviation, config):
            raise ValueError("Unexpected character")

        monkeypatch.setattr(expander, "parse_markup", broken)
        documents.set("file:///index.html", "html", "div>p")

        result = await capability.complete(completion_params("file:///index.html", 0, 5))

        assert result.items == []
        messages = logged_messages(server)
        assert "expanding" in messages[0]
        assert "Unexpected character" in messages[0]

    @pytest.mark.asyncio
    async def test_unexpected_error_is_contained(self, server):
        documents = Mock()
        documents.get.side_effect = KeyError("boom")
        capability = AbbreviationCompletionCapability(server, documents=documents)

        result = await capability.complete(completion_params("file:///index.html", 0, 0))

        assert result.items == []
        assert server.window_log_message.called

    @pytest.mark.asyncio
    async def test_recovers_after_failure(self, capability, documents):
        documents.set("file:///index.html", "html", "\ndiv")

        failed = await capability.complete(completion_params("file:///index.html", 0, 0))
        succeeded = await capability.complete(completion_params("file:///index.html", 1, 3))

        assert failed.items == []
        assert len(succeeded.items) == 1


# ============================================================================
# Capability metadata
# ============================================================================

@pytest.mark.asyncio
async def test_can_handle_every_request(capability):
    assert await capability.can_handle(completion_params("file:///x", 0, 0))


def test_defaults_to_server_document_store(server):
    server.document_store = FakeDocumentStore()
    capability = AbbreviationCompletionCapability(server)

    assert capability.documents is server.document_store


@pytest.mark.asyncio
async def test_resolve_returns_item_unchanged(capability, documents):
    documents.set("file:///index.html", "html", "div")
    item = (await capability.complete(completion_params("file:///index.html", 0, 3))).items[0]

    assert await capability.resolve(item) is item
