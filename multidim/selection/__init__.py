"""
Selection Module
"""
from .expression import (
    Aggregate,
    Filter,
    GroupBy,
    Selection,
    SelectionExpression,
    Selector,
    parse_selection,
    parse_selection_expression,
)
from .labels import LabelRenderer, LabelReport, describe_selection, get_label_names

__all__ = [
    "Aggregate",
    "Filter",
    "GroupBy",
    "Selection",
    "SelectionExpression",
    "Selector",
    "parse_selection",
    "parse_selection_expression",
    "LabelRenderer",
    "LabelReport",
    "describe_selection",
    "get_label_names",
]
