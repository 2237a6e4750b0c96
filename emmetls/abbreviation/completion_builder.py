"""Completion Response Builder."""

from __future__ import annotations

from lsprotocol.types import (
    CompletionItem,
    CompletionItemKind,
    InsertTextFormat,
    Position,
    Range,
    TextEdit,
)

from emmetls.abbreviation.types import ExtractedToken


def token_range(token: ExtractedToken, line_number: int) -> Range:
    """Replacement range covering exactly the token on its own line."""
    return Range(
        start=Position(line=line_number, character=token.start_column),
        end=Position(line=line_number, character=token.end_column),
    )


def build(token: ExtractedToken, expanded_text: str, line_number: int) -> list[CompletionItem]:
    """
    Package an expansion as a single snippet completion item.

    label/detail show the typed abbreviation; documentation previews the
    expansion. ``data`` keeps the range and text for completionItem/resolve.
    """
    edit_range = token_range(token, line_number)

    return [
        CompletionItem(
            label=token.abbreviation,
            kind=CompletionItemKind.Snippet,
            detail=token.abbreviation,
            documentation=expanded_text,
            insert_text_format=InsertTextFormat.Snippet,
            text_edit=TextEdit(range=edit_range, new_text=expanded_text),
            data={
                "range": {
                    "start": {"line": line_number, "character": token.start_column},
                    "end": {"line": line_number, "character": token.end_column},
                },
                "insertText": expanded_text,
            },
        )
    ]
