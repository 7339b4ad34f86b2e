import pytest

from fieldtrack.core.errors import ValidationError
from fieldtrack.services.crew import (
    CrewMode,
    ManualSource,
    TimerSource,
    active_worker_names,
    resolve_crew,
    round_to_quarter_hour,
)

WORKERS = {1: "Ana", 2: "Ben", 3: "Cy"}


def test_timer_count_mode_adds_operator():
    crew = resolve_crew(TimerSource(mode=CrewMode.COUNT, additional_crew=2), WORKERS)
    assert crew.count == 3
    assert crew.names == []


def test_timer_workers_mode_adds_operator():
    crew = resolve_crew(TimerSource(mode=CrewMode.WORKERS, worker_ids=(1, 2)), WORKERS)
    assert crew.count == 3
    assert crew.names == ["Ana", "Ben"]


def test_timer_with_no_extra_crew_is_one():
    assert resolve_crew(TimerSource(mode=CrewMode.COUNT), WORKERS).count == 1


def test_manual_count_mode_is_literal():
    assert resolve_crew(ManualSource(mode=CrewMode.COUNT, crew_count=4), WORKERS).count == 4


def test_manual_workers_mode_counts_selection_only():
    crew = resolve_crew(ManualSource(mode=CrewMode.WORKERS, worker_ids=(1, 2, 3)), WORKERS)
    assert crew.count == 3
    assert crew.names == ["Ana", "Ben", "Cy"]


def test_unknown_worker_ids_are_dropped():
    crew = resolve_crew(ManualSource(mode=CrewMode.WORKERS, worker_ids=(3, 99)), WORKERS)
    assert crew.count == 1
    assert crew.names == ["Cy"]


def test_negative_counts_are_rejected():
    with pytest.raises(ValidationError):
        resolve_crew(TimerSource(mode=CrewMode.COUNT, additional_crew=-1), WORKERS)
    with pytest.raises(ValidationError):
        resolve_crew(ManualSource(mode=CrewMode.COUNT, crew_count=-2), WORKERS)


@pytest.mark.parametrize(
    "hours,expected",
    [
        (0.0, 0.0),
        (0.0667, 0.0),
        (0.124, 0.0),
        (0.125, 0.25),
        (1.6, 1.5),
        (1.63, 1.75),
        (2.5, 2.5),
        (7.9, 8.0),
    ],
)
def test_round_to_quarter_hour(hours, expected):
    assert round_to_quarter_hour(hours) == expected


def test_rounding_is_idempotent():
    for hours in (0.1, 0.37, 1.125, 3.88, 12.6):
        once = round_to_quarter_hour(hours)
        assert round_to_quarter_hour(once) == once


def test_active_worker_names_skips_inactive(db, worker_factory):
    ana = worker_factory("Ana")
    worker_factory("Gone", active=False)
    assert active_worker_names(db) == {ana.id: "Ana"}
