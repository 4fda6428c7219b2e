"""Domain protocols - interfaces for the controller's collaborators.

The controller never depends on concrete UI or lookup implementations.
Hosts plug in a fetcher, a tokenizer, an equivalence and a render surface
host that satisfy these structural types.
"""

from chips_input.domain.protocols.host import RenderSurfaceHost
from chips_input.domain.protocols.suggestions import ChipTokenizer, DiffEquality, SuggestionFetcher

__all__ = [
    "ChipTokenizer",
    "DiffEquality",
    "RenderSurfaceHost",
    "SuggestionFetcher",
]
