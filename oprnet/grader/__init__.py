"""Validation and consensus grading of oracle price records.

Entries are validated one at a time into GradingOPRs. The valid records
of a height form a cohort, which is averaged once and each record graded
against that average. Lower grades are closer to consensus.
"""

from .assets import NATIVE_ASSET, V1_ASSETS, V1_SCHEMA, AssetSchema
from .cohort import collect_cohort
from .errors import DecodeError, GraderError, ValidationError
from .grading import CohortGrades, average_v1, grade_cohort, grade_v1
from .models import GradingOPR, RawEntry, V1Content
from .validate import validate_v1
from .winners import verify_winner_format, verify_winners

__all__ = [
    "NATIVE_ASSET",
    "V1_ASSETS",
    "V1_SCHEMA",
    "AssetSchema",
    "CohortGrades",
    "DecodeError",
    "GraderError",
    "GradingOPR",
    "RawEntry",
    "V1Content",
    "ValidationError",
    "average_v1",
    "collect_cohort",
    "grade_cohort",
    "grade_v1",
    "validate_v1",
    "verify_winner_format",
    "verify_winners",
]
