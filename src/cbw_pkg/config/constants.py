"""Global constants for the child weight model."""

from __future__ import annotations

# Calendar
DAYS_PER_YEAR = 365.0
STEP_TOLERANCE = 1e-9                  # Absorbs rounding when counting whole steps or days

# Energy densities (Hall et al. 2013)
RHO_FM_KCAL_KG = 9.4 * 1000.0          # Energy density of fat mass
RHO_FFM_SLOPE = 4.3                    # rhoFFM = 4.3*FFM + 837
RHO_FFM_INTERCEPT = 837.0
FORBES_C = 10.4                        # Forbes partition constant [kg]

# Energy expenditure
DELTA_MIN = 10.0                       # Physical activity coefficient floor [kcal/kg/day]
DELTA_P = 12.0                         # Age at half-maximal activity decline [years]
DELTA_H = 10.0                         # Hill exponent of the activity decline
FFM_MAINTENANCE = 22.4                 # [kcal/kg/day]
FM_MAINTENANCE = 4.5                   # [kcal/kg/day]
FFM_SYNTHESIS = 230.0                  # Tissue synthesis cost, fat-free mass [kcal/kg]
FM_SYNTHESIS = 180.0                   # Tissue synthesis cost, fat mass [kcal/kg]
THERMIC_FACTOR = 0.24                  # Adaptive thermogenesis per kcal of intake change

# Reference tables
REFERENCE_MIN_AGE = 2
REFERENCE_MAX_AGE = 18
N_REFERENCE_AGES = REFERENCE_MAX_AGE - REFERENCE_MIN_AGE + 1
BMI_CATEGORIES = (1, 2, 3, 4)           # under, normal, over, obese
BMI_CATEGORY_NAMES = ("underweight", "normal", "overweight", "obese")

# Supported ranges when input validation is requested
MIN_AGE_YEARS = 2.0
MAX_AGE_YEARS = 18.0

MODEL_TYPE = "Children"
