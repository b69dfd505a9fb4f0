from enum import Enum

class ScoringScale(str, Enum):
    ONE_TO_FIVE = "1-5"
    ONE_TO_TEN = "1-10"
    ONE_TO_HUNDRED = "1-100"

class RunStatus(str, Enum):
    PENDING = "pending"        # Created, worker has not reported yet
    RUNNING = "running"        # At least one result or an explicit start
    COMPLETED = "completed"    # Every company scored or failed
    FAILED = "failed"          # Run-level fatal error

class Confidence(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

class ScoreLevel(str, Enum):
    HIGH = "high"
    MID = "mid"
    LOW = "low"

class WeightAllocation(str, Enum):
    UNDER = "under"
    EXACT = "exact"
    OVER = "over"
