"""
Abbreviation Locator.

Finds the abbreviation token ending at (or containing) the cursor. The
character scanning is done by emmet's extractor; this module picks the
extraction flavor and turns "nothing found" into a LocateErr value instead
of an exception.
"""

from emmet import extract

from emmetls.abbreviation.types import ExtractedToken, LocateErr, LocateOk, LocateResult
from emmetls.context.types import GrammarKind


NO_ABBREVIATION = "no abbreviation at cursor"


def locate(line_text: str, cursor_column: int, grammar_kind: GrammarKind) -> LocateResult:
    # Clamp so the span can never leave the line
    column = max(0, min(cursor_column, len(line_text)))

    if grammar_kind is GrammarKind.STYLESHEET:
        extracted = extract(line_text, column, {"type": "stylesheet"})
    else:
        extracted = extract(line_text, column)

    if extracted is None or not extracted.abbreviation:
        return LocateErr(NO_ABBREVIATION)

    start = max(0, extracted.start)
    end = min(extracted.end, len(line_text))
    if end < start:
        return LocateErr(NO_ABBREVIATION)

    return LocateOk(ExtractedToken(start, end, extracted.abbreviation))
