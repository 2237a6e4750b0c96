from emmetls.context.types import GrammarKind


# Language identifiers whose documents expand abbreviations as markup
MARKUP_LANGUAGES: frozenset[str] = frozenset({
    "html",

    # Server-side templates
    "blade",
    "twig",
    "eruby",
    "erb",
    "razor",
    "liquid",

    # Component languages (JSX / TSX)
    "javascript",
    "javascriptreact",
    "javascript.jsx",
    "typescript",
    "typescriptreact",
    "typescript.tsx",
})


class GrammarClassifier:
    """
    Maps a document language identifier to a GrammarKind.

    Total function: anything not in MARKUP_LANGUAGES, including "css" and a
    missing identifier, is treated as a stylesheet.
    """

    def __init__(self, markup_languages: frozenset[str] = MARKUP_LANGUAGES) -> None:
        self.markup_languages = markup_languages

    def classify(self, language_id: str | None) -> GrammarKind:
        if language_id in self.markup_languages:
            return GrammarKind.MARKUP
        return GrammarKind.STYLESHEET


def classify(language_id: str | None) -> GrammarKind:
    """Classify with the default markup allow-list."""
    return GrammarClassifier().classify(language_id)
