"""
Domain services for LearnHub.
"""

from .progress import (
    ProgressTracker,
    compute_completion_percentage,
    count_completed,
    is_fully_completed,
)

__all__ = [
    "ProgressTracker",
    "compute_completion_percentage",
    "count_completed",
    "is_fully_completed",
]
