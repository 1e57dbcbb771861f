from .classifier import classify_error
from .pricing import CostBreakdown, calculate_cost
from .types import (
    ErrorClassification,
    GenerationFailure,
    GenerationResult,
    ModelChoice,
    TranscriptionRequest,
)

__all__ = [
    "CostBreakdown",
    "ErrorClassification",
    "GenerationFailure",
    "GenerationResult",
    "ModelChoice",
    "TranscriptionRequest",
    "calculate_cost",
    "classify_error",
]
