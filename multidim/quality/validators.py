"""
Tree Validation Module

Rule-based checks for the assumptions the tree algorithms rely on but do
not enforce:
- Uniform depth across siblings
- Same dimension at every branch of one level
- No dimension repeated along a path
- Dimension and item ids known to the catalog
- Selection expression ids resolvable against the catalog
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Set, Tuple

import structlog

from multidim.catalog import Catalog, ReferenceKind
from multidim.config import get_settings
from multidim.core.tree import is_leaf

logger = structlog.get_logger(__name__)
settings = get_settings()


class ValidationSeverity(str, Enum):
    """Severity levels for validation failures"""
    ERROR = "error"  # Tree cannot be used safely
    WARNING = "warning"  # Usable, results may be surprising
    INFO = "info"


class ValidationStatus(str, Enum):
    """Overall validation status"""
    PASSED = "passed"
    FAILED = "failed"
    PARTIAL = "partial"


@dataclass
class ValidationCheck:
    """Single validation check result"""
    name: str
    passed: bool
    severity: ValidationSeverity
    message: str
    details: Optional[Dict[str, Any]] = None
    failed_count: int = 0
    total_count: int = 0


@dataclass
class ValidationResult:
    """Complete validation suite result"""
    status: ValidationStatus
    total_checks: int
    passed_checks: int
    failed_checks: int
    warning_count: int
    checks: List[ValidationCheck] = field(default_factory=list)
    started_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    completed_at: Optional[datetime] = None

    @property
    def success_rate(self) -> float:
        """Percentage of passed checks"""
        if self.total_checks == 0:
            return 100.0
        return (self.passed_checks / self.total_checks) * 100


def _branches(node: Any, level: int = 0, path: Tuple[str, ...] = ()) -> Iterable[Tuple[Any, int, Tuple[str, ...]]]:
    """Every branch with its level and the dimension ids above it"""
    if is_leaf(node):
        return
    yield node, level, path
    for child in node.children.values():
        yield from _branches(child, level + 1, path + (node.dimension_id,))


def _leaf_depths(node: Any, level: int = 0) -> Iterable[int]:
    if is_leaf(node):
        yield level
        return
    for child in node.children.values():
        yield from _leaf_depths(child, level + 1)


def _summarize(
    results: List[ValidationCheck],
    started_at: datetime,
    strict_mode: bool,
) -> ValidationResult:
    passed_checks = sum(1 for r in results if r.passed)
    failed_checks = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.ERROR)
    warning_count = sum(1 for r in results if not r.passed and r.severity == ValidationSeverity.WARNING)

    if failed_checks > 0:
        status = ValidationStatus.FAILED
    elif warning_count > 0 and strict_mode:
        status = ValidationStatus.FAILED
    elif warning_count > 0:
        status = ValidationStatus.PARTIAL
    else:
        status = ValidationStatus.PASSED

    for result in results:
        if not result.passed:
            logger.warning(
                f"Validation failed: {result.name}",
                message=result.message,
                severity=result.severity.value,
            )

    return ValidationResult(
        status=status,
        total_checks=len(results),
        passed_checks=passed_checks,
        failed_checks=failed_checks,
        warning_count=warning_count,
        checks=results,
        started_at=started_at,
        completed_at=datetime.now(timezone.utc),
    )


class TreeValidator:
    """
    Validator for multi-dimensional trees with a chainable check suite.

    Example:
        validator = TreeValidator()
        validator.add_uniform_depth_check().add_known_dimensions_check(catalog)
        result = validator.validate(tree)
    """

    def __init__(self, strict_mode: bool = False):
        self.strict_mode = strict_mode  # Fail on any warning
        self._checks: List[Callable[[Any], ValidationCheck]] = []

    def reset(self) -> None:
        """Reset validator state"""
        self._checks = []

    def add_uniform_depth_check(
        self,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "TreeValidator":
        """Add check that every leaf sits at the same depth"""
        def check(tree: Any) -> ValidationCheck:
            depths = list(_leaf_depths(tree))
            distinct = sorted(set(depths))
            passed = len(distinct) <= 1

            return ValidationCheck(
                name="uniform_depth",
                passed=passed,
                severity=severity,
                message="All leaves share one depth" if passed else f"Leaves found at depths {distinct}",
                details={"depths": distinct},
                failed_count=0 if passed else len(distinct) - 1,
                total_count=len(depths),
            )

        self._checks.append(check)
        return self

    def add_consistent_levels_check(
        self,
        severity: ValidationSeverity = ValidationSeverity.WARNING,
    ) -> "TreeValidator":
        """Add check that all branches of one level break down by the same dimension"""
        def check(tree: Any) -> ValidationCheck:
            levels: Dict[int, Set[str]] = {}
            for branch, level, _ in _branches(tree):
                levels.setdefault(level, set()).add(branch.dimension_id)
            mixed = {level: sorted(ids) for level, ids in levels.items() if len(ids) > 1}
            passed = not mixed

            return ValidationCheck(
                name="consistent_levels",
                passed=passed,
                severity=severity,
                message="Every level uses one dimension" if passed else f"{len(mixed)} levels mix dimensions",
                details={"mixed_levels": mixed},
                failed_count=len(mixed),
                total_count=len(levels),
            )

        self._checks.append(check)
        return self

    def add_unique_path_dimensions_check(
        self,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "TreeValidator":
        """Add check that no dimension appears twice on one path"""
        def check(tree: Any) -> ValidationCheck:
            total = 0
            repeated: List[str] = []
            for branch, _, path in _branches(tree):
                total += 1
                if branch.dimension_id in path:
                    repeated.append(branch.dimension_id)
            passed = not repeated

            return ValidationCheck(
                name="unique_path_dimensions",
                passed=passed,
                severity=severity,
                message="No dimension repeats on a path" if passed else f"Repeated dimensions: {sorted(set(repeated))}",
                details={"repeated": sorted(set(repeated))},
                failed_count=len(repeated),
                total_count=total,
            )

        self._checks.append(check)
        return self

    def add_known_dimensions_check(
        self,
        catalog: Catalog,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "TreeValidator":
        """Add check that every branch dimension exists in the catalog"""
        time_dimension_id = settings.dimensions.time_dimension_id

        def check(tree: Any) -> ValidationCheck:
            total = 0
            unknown: Set[str] = set()
            for branch, _, _ in _branches(tree):
                total += 1
                if branch.dimension_id not in catalog and branch.dimension_id != time_dimension_id:
                    unknown.add(branch.dimension_id)
            passed = not unknown

            return ValidationCheck(
                name="known_dimensions",
                passed=passed,
                severity=severity,
                message="All dimensions are known" if passed else f"Unknown dimensions: {sorted(unknown)}",
                details={"unknown": sorted(unknown)},
                failed_count=len(unknown),
                total_count=total,
            )

        self._checks.append(check)
        return self

    def add_known_items_check(
        self,
        catalog: Catalog,
        severity: ValidationSeverity = ValidationSeverity.WARNING,
    ) -> "TreeValidator":
        """Add check that every branch item belongs to the branch dimension"""
        def check(tree: Any) -> ValidationCheck:
            total = 0
            unknown: List[str] = []
            for branch, _, _ in _branches(tree):
                dimension = catalog.get(branch.dimension_id)
                if dimension is None:
                    continue
                for item_id in branch.children:
                    total += 1
                    if dimension.get_item(item_id) is None:
                        unknown.append(f"{branch.dimension_id}={item_id}")
            passed = not unknown

            return ValidationCheck(
                name="known_items",
                passed=passed,
                severity=severity,
                message="All items are known" if passed else f"{len(unknown)} unknown items",
                details={"unknown": unknown},
                failed_count=len(unknown),
                total_count=total,
            )

        self._checks.append(check)
        return self

    def add_custom_check(
        self,
        name: str,
        check_func: Callable[[Any], bool],
        message_on_fail: str,
        severity: ValidationSeverity = ValidationSeverity.ERROR,
    ) -> "TreeValidator":
        """Add custom validation check"""
        def check(tree: Any) -> ValidationCheck:
            passed = check_func(tree)
            return ValidationCheck(
                name=name,
                passed=passed,
                severity=severity,
                message="Check passed" if passed else message_on_fail,
            )

        self._checks.append(check)
        return self

    def validate(self, tree: Any) -> ValidationResult:
        """
        Run all validation checks on a tree.

        Args:
            tree: Multi-dimensional tree to validate

        Returns:
            ValidationResult with all check results
        """
        started_at = datetime.now(timezone.utc)
        logger.debug(f"Running {len(self._checks)} tree validation checks")

        results = [check_func(tree) for check_func in self._checks]
        validation_result = _summarize(results, started_at, self.strict_mode)

        logger.info(
            f"Tree validation complete: {validation_result.status.value}",
            passed=validation_result.passed_checks,
            failed=validation_result.failed_checks,
            warnings=validation_result.warning_count,
        )
        return validation_result


def validate_selection_expression(
    expression: Iterable[Sequence[str]],
    catalog: Catalog,
    strict_mode: bool = False,
) -> ValidationResult:
    """
    Check a legacy selection expression before rendering it.

    Reports tuples of the wrong length as errors and ids that resolve to
    neither a dimension nor an item as warnings.
    """
    started_at = datetime.now(timezone.utc)
    entries = [list(entry) for entry in expression]

    malformed = [entry for entry in entries if len(entry) not in (2, 3)]
    unresolved = []
    for entry in entries:
        if not entry:
            continue
        if entry[0] not in catalog:
            unresolved.append(entry[0])
        for reference_id in entry[1:]:
            if catalog.resolve(reference_id) == ReferenceKind.UNKNOWN:
                unresolved.append(reference_id)

    results = [
        ValidationCheck(
            name="selection_shape",
            passed=not malformed,
            severity=ValidationSeverity.ERROR,
            message="All tuples hold 2 or 3 ids" if not malformed else f"{len(malformed)} malformed tuples",
            details={"malformed": malformed},
            failed_count=len(malformed),
            total_count=len(entries),
        ),
        ValidationCheck(
            name="selection_references",
            passed=not unresolved,
            severity=ValidationSeverity.WARNING,
            message="All ids resolve" if not unresolved else f"Unresolved ids: {unresolved}",
            details={"unresolved": unresolved},
            failed_count=len(unresolved),
            total_count=sum(len(entry) for entry in entries),
        ),
    ]
    return _summarize(results, started_at, strict_mode)


def create_tree_validator(catalog: Optional[Catalog] = None, strict_mode: bool = False) -> TreeValidator:
    """Create pre-configured validator for balanced breakdown trees"""
    validator = (
        TreeValidator(strict_mode=strict_mode)
        .add_uniform_depth_check()
        .add_consistent_levels_check()
        .add_unique_path_dimensions_check()
    )
    if catalog is not None:
        validator.add_known_dimensions_check(catalog).add_known_items_check(catalog)
    return validator
