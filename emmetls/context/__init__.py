"""Document context detection for emmetls."""
from .grammar_classifier import GrammarClassifier, classify
from .types import GrammarKind

__all__ = ['GrammarClassifier', 'GrammarKind', 'classify']
