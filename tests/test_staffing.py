import dataclasses

import pytest

from erlangfte.config import EngineSettings
from erlangfte.erlangc import ErlangC
from erlangfte.errors import InvalidParameter, SearchLimitExceeded
from erlangfte.staffing import (
    StaffingRequest,
    breakdown_to_dict,
    compute_headcount,
    evaluate_staffing,
    result_to_dict,
)


def _request(volume, **overrides):
    fields = dict(
        id="1",
        index=0,
        volume=volume,
        interval_length=900,
        aht=300,
        target_service_level=0.8,
        target_time=60,
        max_occupancy=0.8,
        shrinkage=0.2,
    )
    fields.update(overrides)
    return StaffingRequest(**fields)


@pytest.mark.parametrize(
    "volume, expected",
    [
        (0.5, 2),
        (2, 3),
        (10, 8),
        (50, 27),
        (100, 53),
        (200, 105),
        (500, 262),
        (5000, 2605),
    ],
)
def test_reference_scenarios(volume, expected):
    assert compute_headcount(_request(volume)).headcount == expected


def test_reference_scenario_without_occupancy_cap():
    assert compute_headcount(_request(1, max_occupancy=1)).headcount == 3
    assert compute_headcount(_request(1, max_occupancy=0.8)).headcount == 3


def test_long_handle_time_scenario():
    req = _request(
        0.046481566,
        aht=29400,
        target_time=14400,
        shrinkage=0.5,
    )
    assert compute_headcount(req).headcount == 6


def test_zero_volume_floor():
    assert compute_headcount(_request(0, shrinkage=0)).headcount == 1
    assert compute_headcount(_request(0, shrinkage=0.5)).headcount == 2


def test_degenerate_inputs_get_floor():
    assert compute_headcount(_request(-5, shrinkage=0)).headcount == 1
    assert compute_headcount(_request(-5, shrinkage=0.5)).headcount == 2
    assert compute_headcount(_request(100, aht=0, shrinkage=0)).headcount == 1
    assert compute_headcount(_request(100, aht=-30, shrinkage=0.2)).headcount == 2


def test_degenerate_breakdown_is_marked():
    bd = evaluate_staffing(_request(-1, shrinkage=0))
    assert bd.degenerate
    assert bd.agents == 1
    assert bd.headcount == 1


def test_full_shrinkage_uses_near_one_ceiling():
    # 1 / (1 - 0.99999) = 100000
    assert compute_headcount(_request(0, shrinkage=1)).headcount == 100000


def test_occupancy_cap_never_lowers_headcount():
    for volume in (1, 10, 50, 100, 200):
        capped = compute_headcount(_request(volume, max_occupancy=0.8)).headcount
        uncapped = compute_headcount(_request(volume, max_occupancy=1)).headcount
        assert capped >= uncapped


def test_zero_max_occupancy_disables_cap():
    capped = compute_headcount(_request(100, max_occupancy=0.8, shrinkage=0)).headcount
    free = compute_headcount(_request(100, max_occupancy=0, shrinkage=0)).headcount
    assert capped == 42
    assert free < capped


def test_breakdown_meets_targets():
    bd = evaluate_staffing(_request(100))
    assert bd.agents == 42
    assert bd.headcount == 53
    assert bd.service_level >= 0.8
    assert bd.occupancy < 0.8
    assert float(bd.intensity) == pytest.approx(33.3333)

    row = breakdown_to_dict(bd)
    assert row["headcount"] == 53
    assert row["degenerate"] is False


def test_compute_headcount_is_idempotent():
    evaluator = ErlangC()
    req = _request(200)
    first = compute_headcount(req, evaluator=evaluator)
    second = compute_headcount(req, evaluator=evaluator)
    fresh = compute_headcount(req)
    assert first == second == fresh


def test_result_carries_request_identity():
    res = compute_headcount(_request(10, id="queue-7", index=4))
    assert res.id == "queue-7"
    assert res.index == 4
    assert res.ok
    assert result_to_dict(res) == {"id": "queue-7", "index": 4, "headcount": 8, "error": None}


def test_bisect_matches_linear():
    linear = EngineSettings(search_strategy="linear")
    bisect = EngineSettings(search_strategy="bisect")
    for volume in (0.5, 1, 10, 50, 100, 200):
        for occupancy in (0, 0.8):
            req = _request(volume, max_occupancy=occupancy)
            assert (
                compute_headcount(req, settings=linear).headcount
                == compute_headcount(req, settings=bisect).headcount
            )


def test_search_limit():
    with pytest.raises(SearchLimitExceeded):
        compute_headcount(_request(500), settings=EngineSettings(max_agents=50))
    with pytest.raises(SearchLimitExceeded):
        compute_headcount(_request(10, target_service_level=0.99), settings=EngineSettings(max_agents=5))


@pytest.mark.parametrize(
    "overrides",
    [
        {"interval_length": 0},
        {"interval_length": -900},
        {"target_service_level": 1.0},
        {"target_service_level": -0.1},
        {"target_time": -1},
        {"max_occupancy": 1.5},
        {"max_occupancy": -0.1},
        {"shrinkage": 1.2},
        {"shrinkage": -0.1},
        {"volume": float("inf")},
        {"aht": float("nan")},
        {"interval_length": float("nan")},
        {"target_time": float("inf")},
        {"volume": None},
        {"aht": "300"},
        {"shrinkage": True},
    ],
)
def test_invalid_requests_raise(overrides):
    req = dataclasses.replace(_request(10), **overrides)
    with pytest.raises(InvalidParameter):
        compute_headcount(req)


def test_non_finite_aht_is_a_parameter_error_not_degenerate():
    req = _request(10, aht=float("nan"))
    with pytest.raises(InvalidParameter, match="aht must be finite"):
        compute_headcount(req)
    with pytest.raises(InvalidParameter):
        evaluate_staffing(req)


def test_non_numeric_degenerate_fields_are_rejected():
    with pytest.raises(InvalidParameter, match="volume must be a real number"):
        compute_headcount(_request(None))
