"""
Scoring Config Validation
app/scoring/config_validation.py

Hard rules (reject the save):
    - name is required
    - at least one criterion
    - every criterion has a non-empty name
    - criterion ids are unique within the config
    - weights are integers in [0, 100]

Soft rules (save succeeds, caller gets warnings):
    - weights should sum to 100 (under/over allocation)
    - scale should be 1-5, 1-10 or 1-100; anything else scores against a 10 ceiling
"""

from dataclasses import dataclass, field
from typing import List

from app.models.enumerations import WeightAllocation
from app.models.scoring_config import Criterion, ScoringConfigBase
from app.scoring.utils import DEFAULT_MAX_SCORE, is_known_scale

TARGET_TOTAL_WEIGHT = 100


@dataclass
class ConfigValidationResult:
    """Output of validate_config()."""
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    total_weight: int = 0
    weight_allocation: WeightAllocation = WeightAllocation.EXACT

    @property
    def ok(self) -> bool:
        return not self.errors


def total_weight(criteria: List[Criterion]) -> int:
    return sum(c.weight for c in criteria)


def weight_allocation(total: int) -> WeightAllocation:
    """Editor indicator: under, exactly at, or over the 100-point target."""
    if total == TARGET_TOTAL_WEIGHT:
        return WeightAllocation.EXACT
    if total < TARGET_TOTAL_WEIGHT:
        return WeightAllocation.UNDER
    return WeightAllocation.OVER


def validate_config(config: ScoringConfigBase) -> ConfigValidationResult:
    """
    Check a config against the hard and soft rules.

    Args:
        config: Any ScoringConfig-shaped model (create, update or persisted)

    Returns:
        ConfigValidationResult; `ok` is False when any hard rule failed.
    """
    errors: List[str] = []
    warnings: List[str] = []

    if not config.name or not config.name.strip():
        errors.append("Config name is required")

    if not config.criteria:
        errors.append("At least one criterion is required")

    seen_ids = set()
    for position, criterion in enumerate(config.criteria, start=1):
        label = f"Criterion {position}"
        if not criterion.name or not criterion.name.strip():
            errors.append(f"{label}: name is required")
        if criterion.id in seen_ids:
            errors.append(f"{label}: duplicate criterion id '{criterion.id}'")
        seen_ids.add(criterion.id)
        if criterion.weight < 0:
            errors.append(f"{label}: weight must be a non-negative integer")
        elif criterion.weight > TARGET_TOTAL_WEIGHT:
            errors.append(f"{label}: weight must not exceed {TARGET_TOTAL_WEIGHT}")

    total = total_weight(config.criteria)
    allocation = weight_allocation(total)
    if config.criteria and allocation is not WeightAllocation.EXACT:
        warnings.append(
            f"Criterion weights sum to {total}, expected {TARGET_TOTAL_WEIGHT} "
            f"({allocation.value}-allocated); totals will scale proportionally"
        )

    if not is_known_scale(config.scale):
        warnings.append(
            f"Unrecognized scale '{config.scale}'; scores use a maximum of {DEFAULT_MAX_SCORE}"
        )

    return ConfigValidationResult(
        errors=errors,
        warnings=warnings,
        total_weight=total,
        weight_allocation=allocation,
    )
