"""
Data Transformation Module
"""
from .frames import tree_from_frame, tree_to_frame

__all__ = [
    "tree_from_frame",
    "tree_to_frame",
]
