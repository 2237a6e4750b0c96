"""
Expansion Engine Adapter.

Wraps emmet's parse -> serialize step. Every tab-stop emitted by the engine
is rendered through a FieldFormatter, so alternate snippet syntaxes can be
swapped in without touching this module.
"""

from __future__ import annotations

from emmet.config import Config
from emmet.markup import parse as parse_markup, stringify as stringify_markup
from emmet.stylesheet import parse as parse_stylesheet, stringify as stringify_stylesheet

from emmetls.abbreviation.types import FieldFormatter, FieldPlaceholder
from emmetls.context.types import GrammarKind
from emmetls.errors import ExpansionEngineFailure


# Engine syntax used for each grammar
GRAMMAR_SYNTAX: dict[GrammarKind, str] = {
    GrammarKind.MARKUP: "html",
    GrammarKind.STYLESHEET: "css",
}


def render_field(field: FieldPlaceholder) -> str:
    """LSP snippet tab-stop: ``${1}`` or ``${1:default}``."""
    if field.default_text:
        return f"${{{field.index}:{field.default_text}}}"
    return f"${{{field.index}}}"


def snippet_field(index: int, default_text: str | None = None) -> str:
    return render_field(FieldPlaceholder(index, default_text))


def build_config(grammar_kind: GrammarKind, field_formatter: FieldFormatter) -> dict:
    """Engine configuration for one grammar with the field formatter wired in."""

    def output_field(index, placeholder="", *args, **kwargs):
        return field_formatter(index, placeholder or None)

    return {
        "type": grammar_kind.value,
        "syntax": GRAMMAR_SYNTAX[grammar_kind],
        "options": {
            "output.field": output_field,
        },
    }


def expand(
    abbreviation: str,
    grammar_kind: GrammarKind,
    field_formatter: FieldFormatter = snippet_field,
) -> str:
    """
    Expand an abbreviation into snippet text.

    Markup abbreviations are parsed as an element tree and serialized as
    html; stylesheet abbreviations as a property/value list serialized as
    css. No state is kept between calls.

    Raises:
        ExpansionEngineFailure: the engine rejected the abbreviation.
    """
    config = Config(build_config(grammar_kind, field_formatter))
    try:
        if grammar_kind is GrammarKind.MARKUP:
            return stringify_markup(parse_markup(abbreviation, config), config)
        return stringify_stylesheet(parse_stylesheet(abbreviation, config), config)
    except Exception as e:
        raise ExpansionEngineFailure(abbreviation, e) from e
