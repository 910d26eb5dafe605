import pygame

from .theme import (
    ACCENT,
    BORDER,
    CHIP_TEXT,
    H,
    HILITE_RGBA,
    OUTLINE,
    PANEL,
    RADIUS,
    SHADOW_OFFSET,
    SHADOW_RGBA,
    TEXT,
    TOOLTIP_BG,
    W,
)


def _alpha_rect(screen, rect, rgba, radius, width=0):
    """Blit a translucent rounded rect; pygame.draw ignores alpha on the display surface."""
    surf = pygame.Surface((rect.w, rect.h), pygame.SRCALPHA)
    pygame.draw.rect(surf, rgba, surf.get_rect(), width, border_radius=radius)
    screen.blit(surf, rect.topleft)


def draw_shadow(screen, rect, radius=RADIUS, offset=SHADOW_OFFSET, fade=0):
    r, g, b, a = SHADOW_RGBA
    _alpha_rect(screen, rect.move(offset), (r, g, b, max(0, a - fade)), radius)


def draw_panel(screen, rect, title, font):
    draw_shadow(screen, rect)
    pygame.draw.rect(screen, PANEL, rect, border_radius=RADIUS)
    _alpha_rect(screen, pygame.Rect(rect.x + 3, rect.y + 3, rect.w - 6, 26), HILITE_RGBA, RADIUS)
    pygame.draw.rect(screen, BORDER, rect, 2, border_radius=RADIUS)
    screen.blit(font.render(title, True, TEXT), (rect.x + 12, rect.y + 10))


def draw_process_chip(screen, rect, label, color, small, glow_alpha: int = 0):
    """Rounded process chip; a positive glow_alpha adds a pulsing ring (running process)."""
    draw_shadow(screen, rect, radius=10, offset=(0, 4), fade=20)
    pygame.draw.rect(screen, color, rect, border_radius=10)
    pygame.draw.rect(screen, OUTLINE, rect, 2, border_radius=10)
    if glow_alpha > 0:
        _alpha_rect(screen, rect.inflate(10, 10), (*ACCENT, glow_alpha), 12, width=3)
    txt = small.render(label, True, CHIP_TEXT)
    screen.blit(txt, (rect.x + 10, rect.centery - txt.get_height() // 2))


def draw_tooltip(screen, pos, lines, tiny, max_w=460):
    if not lines:
        return

    rendered = [tiny.render(str(ln), True, TEXT) for ln in lines]
    line_h = tiny.get_height() + 4
    w = min(max(s.get_width() for s in rendered) + 20, max_w)
    h = len(rendered) * line_h + 16

    # Anchor below-right of the cursor, clamped to the window
    box = pygame.Rect(pos[0] + 14, pos[1] + 14, w, h)
    box.clamp_ip(pygame.Rect(8, 8, W - 16, H - 16))

    draw_shadow(screen, box, radius=10, offset=(0, 4), fade=10)
    _alpha_rect(screen, box, TOOLTIP_BG, 10)
    _alpha_rect(screen, box, (*BORDER, 230), 10, width=2)

    y = box.y + 8
    for surf in rendered:
        screen.blit(surf, (box.x + 10, y))
        y += line_h
