# This file makes the models directory a Python package
from .bookmark import BookmarkSet

__all__ = [
    'BookmarkSet',
]
