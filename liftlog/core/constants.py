"""Application constants."""

# Workout submission limits (validated at the request boundary)
MAX_EXERCISES_PER_WORKOUT = 50
MAX_SETS_PER_EXERCISE = 50

# Set value bounds: weights fit Numeric(8, 2), reps fit a 32-bit INTEGER column
MAX_SET_WEIGHT = 999_999.99
MAX_SET_REPS = 2_147_483_647

# Response header reporting whether PersonalRecord rows were written for a submit
RECORDS_SYNCED_HEADER = "X-Records-Synced"

# Request header carrying the acting user's id
USER_ID_HEADER = "X-User-Id"
