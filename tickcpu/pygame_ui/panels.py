from typing import Any, Dict, List

import pygame

from tickcpu.engine import CPUScheduler, compute_metrics, timeline_summary

from .draw_helpers import draw_panel, draw_process_chip
from .theme import AGED_BOX, CHIP_TEXT, CPU_IDLE, CPU_RUN, GANTT_BG, GRID, MUTED, OUTLINE, READY_BOX, TEXT
from .utils import compress_gantt, pid_color, ready_chip_label

# (column key, width in px) for the metrics table
METRIC_COLUMNS = [
    ("PID", 50),
    ("NAME", 90),
    ("AT", 42),
    ("BT", 42),
    ("PR", 42),
    ("ST", 42),
    ("CT", 42),
    ("TAT", 54),
    ("WT", 48),
    ("RT", 48),
]
READY_CHIPS_MAX = 6
READY_CHIPS_PER_ROW = 3


def draw_cpu_panel(screen, rect, state: Dict[str, Any], font, small, pulse: int, hover_items=None):
    draw_panel(screen, rect, "CPU", font)
    chip = pygame.Rect(rect.x + 20, rect.y + 60, rect.w - 40, 56)
    cpu = state["cpu_process"]

    if cpu is None:
        draw_process_chip(screen, chip, "IDLE", CPU_IDLE, small)
        tip = ["CPU: IDLE"]
    else:
        label = f"{cpu['name']} rem:{cpu['remaining']}"
        if state["algorithm"] == "RR":
            label += f" q:{cpu['quantum_used']}"
        draw_process_chip(screen, chip, label, CPU_RUN, small, glow_alpha=pulse)
        tip = [f"ID: {cpu['id']}", f"Remaining: {cpu['remaining']}", f"Quantum used: {cpu['quantum_used']}"]

    if hover_items is not None:
        hover_items.append((chip, tip))


def draw_ready_queue(screen, rect, state: Dict[str, Any], font, small, hover_items=None):
    draw_panel(screen, rect, "Ready Queue (front → back)", font)
    queue = state["ready_queue"]
    if not queue:
        screen.blit(small.render("Empty", True, MUTED), (rect.x + 20, rect.y + 70))
        return

    show_priority = state["algorithm"] in ("Priority", "PriorityNP")
    for i, entry in enumerate(queue[:READY_CHIPS_MAX]):
        row, col = divmod(i, READY_CHIPS_PER_ROW)
        chip = pygame.Rect(rect.x + 20 + col * 200, rect.y + 56 + row * 44, 186, 38)
        color = AGED_BOX if entry["priority"] < entry["original_priority"] else READY_BOX
        draw_process_chip(screen, chip, ready_chip_label(entry, show_priority), color, small)
        if hover_items is not None:
            hover_items.append((
                chip,
                [
                    f"ID: {entry['id']}   Name: {entry['name']}",
                    f"Priority: {entry['priority']} (orig {entry['original_priority']})",
                    f"Age: {entry['age_counter']}   Rem: {entry['remaining']}",
                ],
            ))

    hidden = len(queue) - READY_CHIPS_MAX
    if hidden > 0:
        more = small.render(f"(+{hidden} more)", True, MUTED)
        screen.blit(more, (rect.right - 20 - more.get_width(), rect.y + 14))


def draw_gantt(screen, rect, gantt: List[str], font, small, hover_items=None):
    """Gantt blocks for the most recent ticks that fit; older ticks scroll off the left edge."""
    draw_panel(screen, rect, "Gantt Chart", font)
    inner = pygame.Rect(rect.x + 12, rect.y + 52, rect.w - 24, rect.h - 72)
    pygame.draw.rect(screen, GANTT_BG, inner, border_radius=10)

    if not gantt:
        screen.blit(small.render("(no ticks yet)", True, MUTED), (inner.x + 10, inner.y + 10))
        return

    usable = inner.w - 20
    px = max(6, min(40, usable // len(gantt)))
    first = max(0, len(gantt) - usable // px)
    x0, y0, bar_h = inner.x + 10, inner.y + 18, 54

    for name, start, end in compress_gantt(gantt):
        if end <= first:
            continue
        s = max(start, first)
        block = pygame.Rect(x0 + (s - first) * px, y0, max(1, (end - s) * px), bar_h)
        pygame.draw.rect(screen, pid_color(name), block, border_radius=8)
        pygame.draw.rect(screen, OUTLINE, block, 2, border_radius=8)
        if block.w >= 40:
            screen.blit(small.render(name, True, CHIP_TEXT), (block.x + 6, y0 + 16))
        if hover_items is not None:
            hover_items.append((block, [name, f"Segment: {start} → {end}"]))

    visible = len(gantt) - first
    step = max(1, visible // 16)
    for t in range(first, len(gantt) + 1, step):
        mx = x0 + (t - first) * px
        pygame.draw.line(screen, GRID, (mx, y0 + bar_h + 8), (mx, y0 + bar_h + 22), 2)
        screen.blit(small.render(str(t), True, MUTED), (mx - 6, y0 + bar_h + 26))


def draw_trace_panel(screen, rect, trace: List[str], font, tiny):
    """Most recent tick trace lines, newest at the bottom."""
    draw_panel(screen, rect, "Execution Log", font)
    line_h = tiny.get_height() + 4
    max_lines = max(1, (rect.h - 56) // line_h)
    max_px = rect.w - 24

    y = rect.y + 46
    for line in trace[-max_lines:]:
        text = line
        while text and tiny.size(text)[0] > max_px:
            text = text[:-2]
        color = TEXT if "finished" in line else MUTED
        screen.blit(tiny.render(text, True, color), (rect.x + 12, y))
        y += line_h


def _blit_row(screen, tiny, values, x, y, color):
    for value, (_, width) in zip(values, METRIC_COLUMNS):
        screen.blit(tiny.render(str(value), True, color), (x, y))
        x += width


def draw_metrics_panel(screen, rect, scheduler: CPUScheduler, font, small, tiny, scroll_rows: int = 0) -> int:
    """Per-process table with averages; returns the scroll offset clamped to the rows available."""
    draw_panel(screen, rect, "Metrics", font)

    rows, avg_wt, avg_tat, avg_rt = compute_metrics(scheduler.processes)
    util = timeline_summary(scheduler.gantt_chart, len(scheduler.finished))["cpu_util"]
    summary = f"Avg WT: {avg_wt:.2f}   Avg TAT: {avg_tat:.2f}   Avg RT: {avg_rt:.2f}   CPU Util: {util:.1f}%"
    screen.blit(small.render(summary, True, MUTED), (rect.x + 12, rect.y + 46))

    x = rect.x + 12
    y = rect.y + 76
    _blit_row(screen, tiny, [key for key, _ in METRIC_COLUMNS], x, y, TEXT)
    y += 22

    if not rows:
        screen.blit(tiny.render("(no processes)", True, MUTED), (x, y))
        return 0

    row_h = 20
    fits = max(1, (rect.bottom - y - 12) // row_h)
    max_scroll = max(0, len(rows) - fits)
    scroll_rows = max(0, min(max_scroll, int(scroll_rows)))

    for r in rows[scroll_rows:scroll_rows + fits]:
        _blit_row(screen, tiny, [r[key] for key, _ in METRIC_COLUMNS], x, y, MUTED)
        y += row_h

    if max_scroll > 0:
        last = min(scroll_rows + fits, len(rows))
        info = tiny.render(f"Rows {scroll_rows + 1}-{last} / {len(rows)}", True, MUTED)
        screen.blit(info, (rect.right - 12 - info.get_width(), rect.y + 46))

    return scroll_rows
