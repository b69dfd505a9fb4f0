from pydantic import Field
from datetime import datetime, timezone
from typing import List

from app.models.common import CamelModel
from app.models.enumerations import WeightAllocation


class Criterion(CamelModel):
    """
    One weighted dimension of evaluation within a scoring config.
    """

    id: str = Field(
        ...,
        min_length=1,
        max_length=64,
        description="Criterion identifier, unique within its config"
    )

    name: str = Field(
        default="",
        max_length=255,
        description="Criterion display name"
    )

    weight: int = Field(
        default=0,
        description="Share of the total in percentage points (0-100)"
    )

    description: str = Field(
        default="",
        description="What the criterion measures"
    )

    research_guidance: str = Field(
        default="",
        description="Hints for the evaluation worker"
    )


class ScoringConfigBase(CamelModel):
    """
    Base Pydantic model for ScoringConfig.

    Name, criteria and weights are checked by `validate_config` rather than by
    field constraints so the caller gets the full list of violations at once.
    """

    name: str = Field(
        default="",
        max_length=255,
        description="Config name"
    )

    description: str = Field(
        default="",
        description="What the rubric is for"
    )

    scale: str = Field(
        default="1-10",
        description="Score scale: 1-5, 1-10 or 1-100"
    )

    criteria: List[Criterion] = Field(
        default_factory=list,
        description="Ordered criteria; order is presentation order only"
    )

    evaluation_prompt: str = Field(
        default="",
        description="Master prompt handed to the evaluation worker"
    )

    is_default: bool = Field(
        default=False,
        description="Whether this config is preselected for new runs"
    )


class ScoringConfigCreate(ScoringConfigBase):
    """
    Model for creating a new scoring config.
    """
    pass


class ScoringConfigUpdate(ScoringConfigBase):
    """
    Model for replacing an existing scoring config.
    """
    pass


class ScoringConfig(ScoringConfigBase):
    """
    Persisted scoring config, returned in API responses.
    """

    id: str = Field(..., description="Unique config identifier")

    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Record creation timestamp (UTC)"
    )


class ScoringConfigSaveResponse(ScoringConfig):
    """
    Saved config plus the weight-allocation metadata for the editor.
    """

    total_weight: int
    weight_allocation: WeightAllocation
    warnings: List[str] = Field(default_factory=list)


class ScoringConfigListResponse(CamelModel):
    """
    All configs, oldest first.
    """

    items: List[ScoringConfig]
    total: int


class ConfigValidationResponse(CamelModel):
    """
    Dry-run validation result for the config editor.
    """

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    total_weight: int
    weight_allocation: WeightAllocation
