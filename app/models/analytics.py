from pydantic import Field
from typing import Dict, List, Optional

from app.models.common import CamelModel


class DistributionBucketResponse(CamelModel):
    range: str
    low: int
    high: int
    count: int


class DistributionResponse(CamelModel):
    run_id: str
    partial: bool = Field(default=False, description="True while the run can still receive results")
    max_score: int
    bucket_width: int
    buckets: List[DistributionBucketResponse]
    total: int = Field(..., description="Companies counted in the histogram")


class RankedCompany(CamelModel):
    id: str
    name: str
    total_score: float


class RankingResponse(CamelModel):
    run_id: str
    partial: bool = False
    limit: int
    top: List[RankedCompany]
    bottom: List[RankedCompany]


class RadarPointResponse(CamelModel):
    criterion_id: str
    criterion: str
    scores: Dict[str, int] = Field(..., description="Company name -> score on this criterion")


class RadarResponse(CamelModel):
    run_id: str
    partial: bool = False
    max_score: int
    company_ids: List[str]
    points: List[RadarPointResponse]


class ScatterPointResponse(CamelModel):
    company_id: str
    name: str
    x: int
    y: int
    total_score: float


class ScatterResponse(CamelModel):
    run_id: str
    partial: bool = False
    x_criterion_id: Optional[str] = None
    y_criterion_id: Optional[str] = None
    points: List[ScatterPointResponse]
