"""Package-level settings for occupancy.

These are plain module constants; counters and policies read them as
defaults and accept per-instance overrides where it makes sense.
"""

# Minimum number of intervals before a counter with workers > 1 splits the
# accumulation phase into chunks. Below this the thread overhead dominates.
PARALLEL_THRESHOLD = 4096

# Order of equally-counted points in a RankedResult.
DEFAULT_TIE_BREAK = "ascending"
