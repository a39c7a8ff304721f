# slopedash/game/render.py
from __future__ import annotations
import math
from typing import Tuple
import pygame
from .config import (
    COLOR_BG, COLOR_FG, COLOR_ACCENT, COLOR_DANGER,
    COLOR_ROCK, COLOR_TREE, COLOR_SKIER, COLOR_PANEL, DEBUG_HUD
)
from .session import GameSession

SPRITE_COLORS = {"rock": COLOR_ROCK, "tree": COLOR_TREE, "skier": COLOR_SKIER}


def _rotated_quad(rect: pygame.Rect, angle_deg: float):
    """Corners of `rect` rotated around its centre (pygame y grows downward)."""
    cx, cy = rect.center
    a = math.radians(angle_deg)
    ca, sa = math.cos(a), math.sin(a)
    hw, hh = rect.width / 2, rect.height / 2
    pts = []
    for dx, dy in ((-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)):
        pts.append((cx + dx * ca - dy * sa, cy + dx * sa + dy * ca))
    return pts


def draw_world(surf: pygame.Surface, session: GameSession):
    surf.fill(COLOR_BG)

    if DEBUG_HUD:
        for lane in session.spawner.lanes:
            x = int(lane.start)
            pygame.draw.line(surf, (200, 212, 228), (x, 0), (x, session.viewport.height), 1)

    for ob in session.obstacles:
        r = ob.draw_rect
        color = SPRITE_COLORS.get(ob.sprite, COLOR_ROCK)
        if ob.sprite == "tree":
            pygame.draw.polygon(surf, color, (r.midtop, r.bottomleft, r.bottomright))
        elif ob.sprite == "skier":
            pygame.draw.ellipse(surf, color, r)
        else:
            pygame.draw.rect(surf, color, r, border_radius=max(2, r.width // 4))

    p = session.player
    color_player = COLOR_ACCENT if session.alive else COLOR_DANGER
    pygame.draw.polygon(surf, color_player, _rotated_quad(p.draw_rect, p.angle))


def draw_hud(surf: pygame.Surface, session: GameSession, font: pygame.font.Font):
    hud = f"Score: {session.score}"
    surf.blit(font.render(hud, True, COLOR_FG), (16, 12))
    if DEBUG_HUD:
        dbg = (f"seed={session.seed} speed={session.speed:.1f} live={len(session.obstacles)} "
               f"moving={session.moving_count} frame={session.frame}")
        surf.blit(font.render(dbg, True, COLOR_FG), (16, 36))


def draw_button(surf: pygame.Surface, rect: pygame.Rect, label: str, font: pygame.font.Font,
                color: Tuple[int, int, int] = COLOR_ACCENT):
    pygame.draw.rect(surf, color, rect, border_radius=12)
    txt = font.render(label, True, (255, 255, 255))
    surf.blit(txt, (rect.centerx - txt.get_width() // 2, rect.centery - txt.get_height() // 2))


def draw_panel(surf: pygame.Surface, lines, font: pygame.font.Font, top: int = 120):
    """Centered translucent card with one text line per entry."""
    w, h = surf.get_size()
    panel_w = min(w - 40, 520)
    panel_h = 34 * (len(lines) + 1)
    panel = pygame.Surface((panel_w, panel_h), pygame.SRCALPHA)
    panel.fill((*COLOR_PANEL, 200))
    x0 = (w - panel_w) // 2
    surf.blit(panel, (x0, top))
    for i, msg in enumerate(lines):
        txt = font.render(msg, True, (236, 240, 241))
        surf.blit(txt, (x0 + (panel_w - txt.get_width()) // 2, top + 17 + i * 34))
