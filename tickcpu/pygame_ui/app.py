import logging
import math

import pygame

from tickcpu.engine import Algorithm, CPUScheduler, build_default_processes, clone_processes, load_preset

from .draw_helpers import draw_tooltip
from .panels import draw_cpu_panel, draw_gantt, draw_metrics_panel, draw_ready_queue, draw_trace_panel
from .theme import (
    BG,
    CONTENT_W,
    CPU_PANEL_W,
    FPS,
    GANTT_H,
    GAP,
    H,
    MARGIN_X,
    MAX_QUANTUM,
    MAX_TICKS,
    TEXT,
    TICK_MS_DEFAULT,
    TICK_MS_MAX,
    TICK_MS_MIN,
    TICK_MS_STEP,
    TOP_ROW_H,
    TRACE_H,
    W,
)
from .utils import clamp_tick_ms

logger = logging.getLogger(__name__)

ALGO_KEYS = {
    pygame.K_1: Algorithm.FCFS,
    pygame.K_2: Algorithm.SJF,
    pygame.K_3: Algorithm.SRTF,
    pygame.K_4: Algorithm.RR,
    pygame.K_5: Algorithm.PRIORITY,
    pygame.K_6: Algorithm.PRIORITY_NP,
}
PRESET_KEYS = {
    pygame.K_F1: 1,
    pygame.K_F2: 2,
    pygame.K_F3: 3,
    pygame.K_F4: 4,
    pygame.K_F5: 5,
}


def _rebuild(dataset, previous: CPUScheduler) -> CPUScheduler:
    cfg = previous.config
    return CPUScheduler(
        clone_processes(dataset),
        algorithm=cfg.algorithm,
        quantum=cfg.time_quantum,
        aging_enabled=cfg.aging_enabled,
        aging_threshold=cfg.aging_threshold,
        aging_boost=cfg.aging_boost,
    )


def run():
    pygame.init()
    screen = pygame.display.set_mode((W, H))
    pygame.display.set_caption("CPU Scheduling Simulator")
    clock = pygame.time.Clock()

    title_font = pygame.font.SysFont("Arial", 30, bold=True)
    font = pygame.font.SysFont("Arial", 22, bold=True)
    small = pygame.font.SysFont("Arial", 17)
    tiny = pygame.font.SysFont("Arial", 14)

    dataset = build_default_processes()
    scheduler = CPUScheduler(clone_processes(dataset))
    status_msg = "Ready"

    paused = True
    tick_ms = TICK_MS_DEFAULT
    last_tick = pygame.time.get_ticks()
    metrics_scroll = 0

    running = True
    while running:
        clock.tick(FPS)
        now = pygame.time.get_ticks()
        step_once = False

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.MOUSEWHEEL:
                metrics_scroll = max(0, metrics_scroll - event.y)
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    paused = not paused
                elif event.key == pygame.K_n:
                    step_once = True
                elif event.key == pygame.K_r:
                    scheduler = _rebuild(dataset, scheduler)
                    status_msg = "Reset"
                elif event.key == pygame.K_UP:
                    tick_ms = clamp_tick_ms(tick_ms + TICK_MS_STEP, TICK_MS_MIN, TICK_MS_MAX)
                elif event.key == pygame.K_DOWN:
                    tick_ms = clamp_tick_ms(tick_ms - TICK_MS_STEP, TICK_MS_MIN, TICK_MS_MAX)
                elif event.key in ALGO_KEYS:
                    scheduler.set_algorithm(ALGO_KEYS[event.key])
                    status_msg = f"Algorithm {scheduler.algorithm.value}"
                elif event.key == pygame.K_LEFT:
                    scheduler.set_time_quantum(scheduler.quantum - 1)
                    status_msg = f"RR quantum={scheduler.quantum}"
                elif event.key == pygame.K_RIGHT:
                    scheduler.set_time_quantum(min(MAX_QUANTUM, scheduler.quantum + 1))
                    status_msg = f"RR quantum={scheduler.quantum}"
                elif event.key == pygame.K_g:
                    scheduler.set_aging(not scheduler.config.aging_enabled)
                    status_msg = f"Aging {'on' if scheduler.config.aging_enabled else 'off'}"
                elif event.key == pygame.K_LEFTBRACKET:
                    scheduler.set_aging_threshold(scheduler.config.aging_threshold - 1)
                    status_msg = f"Aging threshold={scheduler.config.aging_threshold}"
                elif event.key == pygame.K_RIGHTBRACKET:
                    scheduler.set_aging_threshold(scheduler.config.aging_threshold + 1)
                    status_msg = f"Aging threshold={scheduler.config.aging_threshold}"
                elif event.key in PRESET_KEYS:
                    dataset = load_preset(PRESET_KEYS[event.key])
                    scheduler = _rebuild(dataset, scheduler)
                    status_msg = f"Loaded preset {PRESET_KEYS[event.key]}"

        if not scheduler.is_finished():
            due = (not paused) and (now - last_tick >= tick_ms)
            if due or step_once:
                if scheduler.time >= MAX_TICKS:
                    if not paused:
                        logger.warning("tick cap %d reached; pausing playback", MAX_TICKS)
                    paused = True
                    status_msg = f"Tick cap {MAX_TICKS} reached"
                else:
                    scheduler.tick()
                    last_tick = now
        elif not paused:
            paused = True
            status_msg = "Completed"

        # One snapshot per frame; the panels only read it
        state = scheduler.get_state()
        hover_items = []
        screen.fill(BG)

        cfg = scheduler.config
        header = [
            f"Algo: {state['algorithm']} | Time: {state['time']} | "
            f"Finished: {len(state['finished'])}/{len(scheduler.processes)} | Tick: {tick_ms}ms | "
            f"Q={cfg.time_quantum} | Aging: {'on' if cfg.aging_enabled else 'off'} (threshold {cfg.aging_threshold})",
            "Controls: SPACE Play/Pause | N Step | R Reset | UP Slow | DOWN Fast | ←/→ Quantum | G Aging | [ ] Threshold",
            f"Algorithms: 1 FCFS | 2 SJF | 3 SRTF | 4 RR | 5 Priority | 6 PriorityNP | F1-F5 presets | Status: {status_msg}",
        ]
        y = 14
        title_surf = title_font.render("CPU Scheduling Simulator", True, TEXT)
        screen.blit(title_surf, (18, y))
        y += title_surf.get_height() + 6
        for ln in header:
            surf = small.render(ln, True, TEXT)
            screen.blit(surf, (18, y))
            y += surf.get_height() + 4

        content_top = y + 12
        cpu_panel = pygame.Rect(MARGIN_X, content_top, CPU_PANEL_W, TOP_ROW_H)
        rq_panel = pygame.Rect(cpu_panel.right + 20, content_top, CONTENT_W - CPU_PANEL_W - 20, TOP_ROW_H)
        pulse = int(60 + 90 * (0.5 + 0.5 * math.sin(now / 220.0)))
        draw_cpu_panel(screen, cpu_panel, state, font, small, pulse, hover_items=hover_items)
        draw_ready_queue(screen, rq_panel, state, font, small, hover_items=hover_items)

        gantt_panel = pygame.Rect(MARGIN_X, cpu_panel.bottom + GAP, CONTENT_W, GANTT_H)
        draw_gantt(screen, gantt_panel, scheduler.gantt_chart, font, small, hover_items=hover_items)

        trace_panel = pygame.Rect(MARGIN_X, gantt_panel.bottom + GAP, CONTENT_W, TRACE_H)
        draw_trace_panel(screen, trace_panel, scheduler.event_log, font, tiny)

        metrics_panel = pygame.Rect(MARGIN_X, trace_panel.bottom + GAP, CONTENT_W, max(120, H - trace_panel.bottom - GAP - 16))
        metrics_scroll = draw_metrics_panel(screen, metrics_panel, scheduler, font, small, tiny, metrics_scroll)

        if paused:
            screen.blit(title_font.render("PAUSED", True, TEXT), (940, 14))

        mx, my = pygame.mouse.get_pos()
        for r, lines in reversed(hover_items):
            if r.collidepoint((mx, my)):
                draw_tooltip(screen, (mx, my), lines, tiny)
                break

        pygame.display.flip()

    pygame.quit()
