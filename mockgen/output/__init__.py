"""
Output module exports
"""
from .query_builder import build_insert_query, render_literal, quote_identifier

__all__ = [
    'build_insert_query',
    'render_literal',
    'quote_identifier'
]
