"""
Smart responder - split into focused modules.

This package decides how to answer chat messages: canned text, canned
rich cards, or a generated answer paged as a step-by-step walkthrough.
"""
from .chunking import split_for_transport
from .config_loader import load_trigger_definitions
from .engine import SmartResponder
from .matching import PhraseMatcher, passes_gate
from .similarity import SimilarityScorer
from .steps import parse_steps

__all__ = [
    "PhraseMatcher",
    "SimilarityScorer",
    "SmartResponder",
    "load_trigger_definitions",
    "parse_steps",
    "passes_gate",
    "split_for_transport",
]
