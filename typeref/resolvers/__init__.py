"""
Resolver package for turning import specifiers in doc comments into module ids.
"""

from .path_resolver import PathResolver, is_relative_specifier

__all__ = [
    'PathResolver',
    'is_relative_specifier',
]
