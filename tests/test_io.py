import io
import json

import pandas as pd
import pytest

from erlangfte.io import (
    read_requests_csv,
    read_requests_json,
    requests_from_frame,
    results_to_csv,
    results_to_frame,
)
from erlangfte.staffing import StaffingResult


LEGACY_JSON = [
    {
        "ID": "1",
        "Index": 0,
        "Volume": 10.0,
        "IntervalLength": 900,
        "Aht": 300,
        "TargetServiceLevel": 0.8,
        "TargetTime": 60,
        "MaxOccupancy": 0.8,
        "Shrinkage": 0.2,
    },
    {
        "ID": "2",
        "Index": 1,
        "Volume": 0.5,
        "IntervalLength": 900,
        "Aht": 300,
        "TargetServiceLevel": 0.8,
        "TargetTime": 60,
        "MaxOccupancy": 0.8,
        "Shrinkage": 0.2,
    },
]


def test_read_legacy_json():
    df = read_requests_json(io.StringIO(json.dumps(LEGACY_JSON)))
    reqs = requests_from_frame(df)
    assert [r.id for r in reqs] == ["1", "2"]
    assert reqs[0].volume == 10.0
    assert reqs[0].interval_length == 900
    assert isinstance(reqs[0].aht, int)
    assert reqs[1].index == 1


def test_read_json_bytes():
    df = read_requests_json(io.BytesIO(json.dumps(LEGACY_JSON).encode("utf-8")))
    assert len(df) == 2


def test_read_json_rejects_non_array():
    with pytest.raises(ValueError):
        read_requests_json(io.StringIO(json.dumps({"ID": "1"})))


def test_read_csv_defaults_index_to_row_position():
    text = (
        "id,volume,interval_length,aht,target_service_level,target_time,max_occupancy,shrinkage\n"
        "007,100,900,300,0.8,60,0.8,0.2\n"
        "008,500,900,300,0.8,60,0.8,0.2\n"
    )
    reqs = requests_from_frame(read_requests_csv(io.StringIO(text)))
    assert [r.index for r in reqs] == [0, 1]
    assert [r.id for r in reqs] == ["007", "008"]


def test_missing_columns_raise():
    df = pd.DataFrame({"id": ["1"], "volume": [10]})
    with pytest.raises(ValueError, match="Missing required columns"):
        requests_from_frame(df)


def test_fractional_seconds_are_rejected():
    text = (
        "id,volume,interval_length,aht,target_service_level,target_time,max_occupancy,shrinkage\n"
        "1,100,900,300.7,0.8,60,0.8,0.2\n"
    )
    with pytest.raises(ValueError, match="aht must be a whole number"):
        read_requests_csv(io.StringIO(text))


def test_whole_float_seconds_are_accepted():
    records = [dict(LEGACY_JSON[0], Aht=300.0, TargetTime=60.0)]
    reqs = requests_from_frame(read_requests_json(io.StringIO(json.dumps(records))))
    assert reqs[0].aht == 300
    assert reqs[0].target_time == 60


def test_results_to_frame_sorts_and_keeps_errors():
    results = [
        StaffingResult(id="b", index=1, headcount=None, error="InvalidParameter: interval_length must be > 0"),
        StaffingResult(id="a", index=0, headcount=8),
    ]
    df = results_to_frame(results)
    assert df["id"].tolist() == ["a", "b"]
    assert df.loc[0, "headcount"] == 8
    assert pd.isna(df.loc[1, "headcount"])
    assert df.loc[1, "error"].startswith("InvalidParameter")

    csv_text = results_to_csv(results)
    assert csv_text.splitlines()[0] == "id,index,headcount,error"
