"""Domain entities: population, physiological constants and reference curves."""

from .population import Population
from .parameters import ChildParameters, SEX_COEFFICIENTS, resolve_parameters
from .reference import (
    FFM_REFERENCE_TABLE,
    FM_REFERENCE_TABLE,
    ReferenceCurves,
    blend_reference_table,
    interpolate_reference,
)

__all__ = [
    "Population",
    "ChildParameters",
    "SEX_COEFFICIENTS",
    "resolve_parameters",
    "FFM_REFERENCE_TABLE",
    "FM_REFERENCE_TABLE",
    "ReferenceCurves",
    "blend_reference_table",
    "interpolate_reference",
]
