"""Abbreviation extraction, expansion and packaging."""
from .completion_builder import build
from .expander import expand, snippet_field
from .locator import locate
from .types import ExtractedToken, FieldPlaceholder, LocateErr, LocateOk

__all__ = [
    'ExtractedToken',
    'FieldPlaceholder',
    'LocateErr',
    'LocateOk',
    'build',
    'expand',
    'locate',
    'snippet_field',
]
