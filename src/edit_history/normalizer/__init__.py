"""Notification normalizer and the shadow state it maintains."""

from .normalizer import Normalizer
from .state import CompositionShadow, NormalizerState, SelectionShadow

__all__ = ["CompositionShadow", "Normalizer", "NormalizerState", "SelectionShadow"]
