"""Lattice lexer and the token stream built on it."""

from __future__ import annotations

from .lattice_lexer import best_at, candidates_at, consume_best
from .token_stream import TokenStream

__all__ = ["TokenStream", "best_at", "candidates_at", "consume_best"]
