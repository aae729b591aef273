"""Lead submission to the intake API."""

from .client import LeadsClient, LeadSubmissionError, USER_FACING_ERROR

__all__ = [
    "LeadsClient",
    "LeadSubmissionError",
    "USER_FACING_ERROR",
]
