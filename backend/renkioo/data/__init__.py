from .age_params import (
    AgeParams,
    TODDLER,
    PRESCHOOL,
    EARLY_READER,
    PRETEEN,
    get_age_params,
)

__all__ = [
    "AgeParams",
    "TODDLER",
    "PRESCHOOL",
    "EARLY_READER",
    "PRETEEN",
    "get_age_params",
]
