from tickcpu.pygame_ui.theme import CPU_IDLE
from tickcpu.pygame_ui.utils import clamp_tick_ms, compress_gantt, pid_color, ready_chip_label


def test_compress_gantt_merges_runs():
    assert compress_gantt([]) == []
    assert compress_gantt(["P1", "P1", "IDLE", "P2"]) == [("P1", 0, 2), ("IDLE", 2, 3), ("P2", 3, 4)]


def test_pid_color_is_stable():
    assert pid_color("P1") == pid_color("P1")
    assert pid_color("IDLE") == CPU_IDLE


def test_ready_chip_label_marks_aged_entries():
    entry = {"id": 2, "name": "P2", "remaining": 3, "priority": 1, "original_priority": 3}
    assert ready_chip_label(entry, show_priority=True) == "P2 pr:1 rem:3 *"
    assert ready_chip_label(entry, show_priority=False) == "P2 rem:3"

    entry["priority"] = 3
    assert ready_chip_label(entry, show_priority=True) == "P2 pr:3 rem:3"


def test_clamp_tick_ms():
    assert clamp_tick_ms(50, 100, 1500) == 100
    assert clamp_tick_ms(2000, 100, 1500) == 1500
    assert clamp_tick_ms(700, 100, 1500) == 700
