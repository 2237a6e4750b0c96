"""
Document Store

Read-only view over the documents pygls keeps in sync with the editor.
pygls applies incremental didChange edits to its workspace before any
request handler runs; the completion path only reads snapshots from it.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from lsprotocol.types import Position
from pygls.workspace.position_codec import PositionCodec

if TYPE_CHECKING:
    from emmetls.lsp.emmet_language_server import EmmetLanguageServer


LINE_BREAK = re.compile(r"\r?\n")


@dataclass(frozen=True)
class DocumentSnapshot:
    """
    Immutable copy of a document taken at the start of a request.

    Columns exchanged with the client are in the negotiated position
    encoding (UTF-16 code units unless the client asked otherwise);
    position_codec converts them to and from str indices.
    """

    uri: str
    language_id: str | None
    version: int | None
    text: str
    position_codec: PositionCodec = field(default_factory=PositionCodec, compare=False)

    def line(self, line_number: int) -> str:
        """Text of one line without its line break; "" past the end."""
        lines = LINE_BREAK.split(self.text)
        if 0 <= line_number < len(lines):
            return lines[line_number]
        return ""

    def column_from_client(self, line_text: str, character: int) -> int:
        """Client character offset on line_text -> str index."""
        position = self.position_codec.position_from_client_units(
            [line_text], Position(line=0, character=character)
        )
        return position.character

    def column_to_client(self, line_text: str, column: int) -> int:
        """str index on line_text -> client character offset."""
        return self.position_codec.client_num_units(line_text[:column])


class DocumentStore:
    """
    Snapshots of open documents, keyed by URI.

    Only open documents are returned: pygls' get_text_document() would
    lazily load unknown URIs from disk, which is not what the editor sees.
    """

    def __init__(self, server: EmmetLanguageServer) -> None:
        self.server = server

    def get(self, uri: str) -> DocumentSnapshot | None:
        document = self.server.workspace.text_documents.get(uri)
        if document is None:
            return None

        return DocumentSnapshot(
            uri=document.uri,
            language_id=document.language_id,
            version=document.version,
            text=document.source,
            position_codec=document.position_codec,
        )
