from enum import Enum


class GrammarKind(Enum):
    """Serialization target for an abbreviation."""

    MARKUP = "markup"           # html and html-embedding templates, JSX/TSX
    STYLESHEET = "stylesheet"   # css and everything not in the markup list
