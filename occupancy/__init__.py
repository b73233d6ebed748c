import logging

from .comparison import Comparison, DivergenceError, compare
from .counters import BruteForceCounter, OccupancyCounter, SweepLineCounter
from .interval import Interval, InvalidIntervalError, coerce_point
from .intervalset import IntervalSet
from .metrics import coverage_ratio, mean_occupancy, peak, peaks, total_presence
from .occupancy_map import OccupancyMap, Run
from .ranking import Ranked, RankedResult, RankingPolicy, rank

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "Interval",
    "IntervalSet",
    "InvalidIntervalError",
    "coerce_point",
    "OccupancyMap",
    "Run",
    "OccupancyCounter",
    "SweepLineCounter",
    "BruteForceCounter",
    "Ranked",
    "RankedResult",
    "RankingPolicy",
    "rank",
    "peak",
    "peaks",
    "total_presence",
    "coverage_ratio",
    "mean_occupancy",
    "Comparison",
    "DivergenceError",
    "compare",
]
