import json

import pytest

from tickcpu.engine import (
    PRESETS,
    Process,
    build_default_processes,
    clone_processes,
    load_preset,
    load_processes_csv,
    load_processes_json,
    process_from_dict,
)


def test_every_preset_loads():
    for preset_id in PRESETS:
        procs = load_preset(preset_id)
        assert procs
        assert len({p.id for p in procs}) == len(procs)


def test_unknown_preset_is_rejected():
    with pytest.raises(ValueError, match="unknown preset 42"):
        load_preset(42)


def test_default_dataset_is_first_preset():
    assert [(p.id, p.arrival_time, p.burst_time) for p in build_default_processes()] == [
        (p.id, p.arrival_time, p.burst_time) for p in load_preset(1)
    ]


def test_csv_loader_skips_header_and_short_rows(tmp_path):
    path = tmp_path / "procs.csv"
    path.write_text(
        "id,name,arrival,burst,priority\n"
        "1,Editor,0,4,2\n"
        "2,Shell,3,2\n"
        "broken,row\n"
        "3,,x,,1\n",
        encoding="utf-8",
    )

    procs = load_processes_csv(str(path))

    assert [p.id for p in procs] == [1, 2, 3]
    assert procs[0].name == "Editor"
    assert procs[0].priority == 2
    assert procs[1].priority == 0
    # Bad numbers fall back to defaults
    assert procs[2].name == "P3"
    assert procs[2].arrival_time == 0
    assert procs[2].burst_time == 1


def test_json_loader_accepts_list_or_wrapped_object(tmp_path):
    items = [
        {"id": 1, "name": "A", "arrival_time": 0, "burst_time": 3, "priority": 1},
        {"pid": 7, "arrival": 2, "burst": 4},
    ]
    flat = tmp_path / "flat.json"
    flat.write_text(json.dumps(items), encoding="utf-8")
    wrapped = tmp_path / "wrapped.json"
    wrapped.write_text(json.dumps({"processes": items}), encoding="utf-8")

    for path in (flat, wrapped):
        procs = load_processes_json(str(path))
        assert [p.id for p in procs] == [1, 7]
        assert procs[1].name == "P7"
        assert procs[1].arrival_time == 2
        assert procs[1].burst_time == 4


def test_json_loader_missing_file_raises(tmp_path):
    with pytest.raises(OSError):
        load_processes_json(str(tmp_path / "nope.json"))


@pytest.mark.parametrize(
    "item",
    [
        {"id": 1, "arrival_time": -1, "burst_time": 2},
        {"id": 1, "arrival_time": 0, "burst_time": 0},
        {"id": "one", "arrival_time": 0, "burst_time": 2},
    ],
)
def test_process_from_dict_rejects_bad_fields(item):
    with pytest.raises(ValueError):
        process_from_dict(item, 1)


def test_clone_drops_runtime_state():
    p = Process(5, "P5", 1, 4, priority=6)
    p.priority = 2
    p.remaining_time = 1
    p.start_time = 3

    (copy,) = clone_processes([p])

    assert copy is not p
    assert copy.priority == 6
    assert copy.remaining_time == 4
    assert copy.start_time == -1


@pytest.mark.parametrize("row", ["1,A,-2,3,0\n", "1,A,0,0,0\n"])
def test_csv_loader_rejects_out_of_range_values(tmp_path, row):
    path = tmp_path / "bad.csv"
    path.write_text(row, encoding="utf-8")

    with pytest.raises(ValueError):
        load_processes_csv(str(path))
