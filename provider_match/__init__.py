"""Provider matching and booking price quotes."""

from .matching_logic import find_matches
from .remote_matching import find_and_rank_providers
from .utils.pricing import calculate_price

__all__ = ["find_matches", "find_and_rank_providers", "calculate_price"]
