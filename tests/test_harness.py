from tickcpu.harness import build_parser, main


def test_run_prints_table_and_averages(capsys):
    assert main(["run", "--preset", "1"]) == 0
    out = capsys.readouterr().out

    assert "Algorithm: FCFS" in out
    assert "Finish order: 1 2 3" in out
    assert "Average Waiting Time: 3.33" in out
    assert "CPU Utilization: 100.0%" in out


def test_run_with_trace_prints_every_tick(capsys):
    assert main(["run", "--preset", "2", "--algorithm", "RR", "--quantum", "2", "--trace"]) == 0
    out = capsys.readouterr().out

    assert "Algorithm: RR (Q=2)" in out
    assert "Time 4: Process 2 quantum expired. Running Process 1 (3 remaining). " in out
    assert "Finish order: 3 2 4 1" in out


def test_run_from_csv(tmp_path, capsys):
    path = tmp_path / "jobs.csv"
    path.write_text("id,name,arrival,burst,priority\n1,A,0,2,1\n2,B,0,1,0\n", encoding="utf-8")

    assert main(["run", "--csv", str(path), "--algorithm", "SJF"]) == 0
    assert "Finish order: 2 1" in capsys.readouterr().out


def test_run_rejects_duplicate_ids(tmp_path, capsys):
    path = tmp_path / "dup.csv"
    path.write_text("1,A,0,2,1\n1,B,0,1,0\n", encoding="utf-8")

    assert main(["run", "--csv", str(path)]) == 2
    assert "already exists" in capsys.readouterr().err


def test_compare_rejects_duplicate_ids(tmp_path, capsys):
    path = tmp_path / "dup.csv"
    path.write_text("1,A,0,2,1\n1,B,0,1,0\n", encoding="utf-8")

    assert main(["compare", "--csv", str(path)]) == 2
    assert "already exists" in capsys.readouterr().err


def test_unknown_preset_exits_with_load_error(capsys):
    assert main(["run", "--preset", "99"]) == 2
    assert "unknown preset 99" in capsys.readouterr().err


def test_missing_dataset_exits_with_load_error(tmp_path, capsys):
    assert main(["run", "--json", str(tmp_path / "missing.json")]) == 2
    assert "cannot load dataset" in capsys.readouterr().err


def test_tick_cap_returns_nonzero(capsys):
    assert main(["run", "--preset", "3", "--max-ticks", "4"]) == 1
    assert "Finish order:" in capsys.readouterr().out


def test_compare_lists_every_algorithm(capsys):
    assert main(["compare", "--preset", "5"]) == 0
    out = capsys.readouterr().out
    for name in ("FCFS", "SJF", "SRTF", "RR", "Priority", "PriorityNP"):
        assert name in out


def test_parser_defaults():
    args = build_parser().parse_args(["serve"])
    assert args.host == "0.0.0.0"
    assert args.port == 8080
