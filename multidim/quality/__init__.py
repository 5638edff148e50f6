"""
Data Quality Module
"""
from .validators import (
    TreeValidator,
    ValidationCheck,
    ValidationResult,
    ValidationSeverity,
    ValidationStatus,
    create_tree_validator,
    validate_selection_expression,
)

__all__ = [
    "TreeValidator",
    "ValidationCheck",
    "ValidationResult",
    "ValidationSeverity",
    "ValidationStatus",
    "create_tree_validator",
    "validate_selection_expression",
]
