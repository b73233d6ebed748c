import pytest

from occupancy import (
    BruteForceCounter,
    Ranked,
    coverage_ratio,
    mean_occupancy,
    peak,
    peaks,
    total_presence,
)

SCENARIO = [(1901, 1905), (1903, 1910), (1908, 1908)]


def test_peak() -> None:
    assert peak(SCENARIO) == Ranked(point=1903, count=2)
    assert peak(SCENARIO, counter=BruteForceCounter()) == (1903, 2)


def test_peaks() -> None:
    assert peaks(SCENARIO) == [(1903, 2), (1904, 2), (1905, 2), (1908, 2)]


def test_total_presence() -> None:
    assert total_presence(SCENARIO) == 14


def test_coverage_ratio() -> None:
    assert coverage_ratio(SCENARIO) == 1.0
    assert coverage_ratio([(1, 2), (5, 6)]) == pytest.approx(4 / 6)


def test_mean_occupancy() -> None:
    assert mean_occupancy(SCENARIO) == pytest.approx(1.4)


def test_empty_input() -> None:
    assert peak([]) is None
    assert peaks([]) == []
    assert total_presence([]) == 0
    assert coverage_ratio([]) == 0.0
    assert mean_occupancy([]) == 0.0


def test_interval_wider_than_sys_maxsize() -> None:
    wide = [(0, 2**63)]

    assert peak(wide) == (0, 1)
    assert coverage_ratio(wide) == 1.0
    assert mean_occupancy(wide) == 1.0
    assert total_presence(wide) == 2**63 + 1
