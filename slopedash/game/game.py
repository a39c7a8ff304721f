# slopedash/game/game.py
import sys, argparse
import pygame
from pygame import K_LEFT, K_RIGHT, K_a, K_d, K_ESCAPE, K_p, K_r, K_s, K_l, K_c, K_y, K_RETURN, K_BACKSPACE
from .config import (
    WIDTH, HEIGHT, MOBILE_WIDTH, MOBILE_HEIGHT, FPS, SEED_DEFAULT,
    NAME_MAX_LEN, HIGHSCORES_FILE_DEFAULT
)
from .highscores import HighScoreStore
from .render import draw_world, draw_hud, draw_button, draw_panel
from .session import GameSession
from .spawner import Viewport

PLAY, GAME_OVER, NAME_ENTRY, LEADERBOARD = "play", "game_over", "name_entry", "leaderboard"


def parse_args():
    p = argparse.ArgumentParser()
    p.add_argument("--seed", type=int, default=None,
                   help="Run seed. Omit for SEED_DEFAULT, use -1 for random each launch.")
    p.add_argument("--mobile", action="store_true", help="Use the narrow mobile viewport")
    p.add_argument("--width", type=int, default=None)
    p.add_argument("--height", type=int, default=None)
    p.add_argument("--scores-file", type=str, default=HIGHSCORES_FILE_DEFAULT,
                   help="JSON file holding the leaderboard")
    return p.parse_args()


def resolve_viewport(args) -> Viewport:
    w = args.width or (MOBILE_WIDTH if args.mobile else WIDTH)
    h = args.height or (MOBILE_HEIGHT if args.mobile else HEIGHT)
    if w < 200 or h < 300:
        raise ValueError(f"Viewport too small: {w}x{h}")
    return Viewport(w, h)


def replay_seed(session: GameSession, launch_seed):
    """Seed for the next run: a fixed launch seed replays, a random launch stays random."""
    return session.seed if launch_seed is not None else None


def save_target(store: HighScoreStore, score: int) -> str:
    """Scene after pressing S: name entry only when the score makes the board."""
    return NAME_ENTRY if store.qualifies(score) else LEADERBOARD


def run():
    args = parse_args()
    viewport = resolve_viewport(args)

    if args.seed is None:
        launch_seed = SEED_DEFAULT
    elif args.seed == -1:
        launch_seed = None      # GameSession picks one
    else:
        launch_seed = args.seed

    store = HighScoreStore(args.scores_file)

    pygame.init()
    pygame.display.set_caption("Slope Dash")
    screen = pygame.display.set_mode((viewport.width, viewport.height))
    clock = pygame.time.Clock()
    font = pygame.font.SysFont("inter", 22)
    big = pygame.font.SysFont("inter", 44, bold=True)

    btn = 90 if not viewport.is_mobile else 80
    btn_y = viewport.height - (130 if not viewport.is_mobile else 110)
    left_btn = pygame.Rect(24, btn_y, btn, btn)
    right_btn = pygame.Rect(viewport.width - 24 - btn, btn_y, btn, btn)

    def new_session(seed_spec):
        s = GameSession(viewport, seed_spec)
        s.start(0.0)
        return s

    session = new_session(launch_seed)
    sim_ms = 0.0
    state = PLAY
    name_buf = ""
    confirm_clear = False

    while True:
        dt_ms = min(clock.tick(FPS), 1000.0 / 30.0)   # clamp stalls

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                pygame.quit(); sys.exit()

            if event.type == pygame.KEYDOWN and event.key == K_ESCAPE:
                pygame.quit(); sys.exit()

            if state == PLAY:
                if event.type == pygame.KEYDOWN:
                    if event.key in (K_LEFT, K_a):
                        session.set_key_direction(-1)
                    elif event.key in (K_RIGHT, K_d):
                        session.set_key_direction(1)
                    elif event.key == K_p:
                        if session.paused:
                            session.resume()
                        else:
                            session.pause()
                elif event.type == pygame.KEYUP and event.key in (K_LEFT, K_a, K_RIGHT, K_d):
                    held = pygame.key.get_pressed()
                    if held[K_LEFT] or held[K_a]:
                        session.set_key_direction(-1)
                    elif held[K_RIGHT] or held[K_d]:
                        session.set_key_direction(1)
                    else:
                        session.set_key_direction(0)
                elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                    if left_btn.collidepoint(event.pos):
                        session.player.press(-1)
                    elif right_btn.collidepoint(event.pos):
                        session.player.press(1)
                    else:
                        session.player.start_swipe(event.pos[0])
                elif event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                    if session.player.moving:
                        session.player.release()
                    else:
                        session.player.end_swipe(event.pos[0], sim_ms, viewport.width)

            elif state == GAME_OVER and event.type == pygame.KEYDOWN:
                if event.key == K_r:
                    session, sim_ms, state = new_session(replay_seed(session, launch_seed)), 0.0, PLAY
                elif event.key == K_s:
                    name_buf, state = "", save_target(store, session.score)
                elif event.key == K_l:
                    state = LEADERBOARD

            elif state == NAME_ENTRY and event.type == pygame.KEYDOWN:
                if event.key == K_RETURN:
                    store.add(name_buf, session.score)
                    state = LEADERBOARD
                elif event.key == K_BACKSPACE:
                    name_buf = name_buf[:-1]
                elif event.unicode and event.unicode.isprintable() and len(name_buf) < NAME_MAX_LEN:
                    name_buf += event.unicode

            elif state == LEADERBOARD and event.type == pygame.KEYDOWN:
                if confirm_clear:
                    if event.key == K_y:
                        store.clear()
                    confirm_clear = False
                elif event.key == K_c:
                    confirm_clear = True
                elif event.key == K_r:
                    session, sim_ms, state = new_session(replay_seed(session, launch_seed)), 0.0, PLAY

        if state == PLAY and not session.paused:
            sim_ms += dt_ms
            if not session.update(sim_ms):
                state = GAME_OVER

        # --- Render ---
        draw_world(screen, session)
        draw_hud(screen, session, font)

        if state == PLAY:
            draw_button(screen, left_btn, "<", big)
            draw_button(screen, right_btn, ">", big)
            if session.paused:
                draw_panel(screen, ["PAUSED", "P resume | ESC quit"], font)
        elif state == GAME_OVER:
            draw_panel(screen, ["GAME OVER", f"Score: {session.score}",
                                "R retry | S save score | L leaderboard"
                                if store.qualifies(session.score) else "R retry | L leaderboard"], font)
        elif state == NAME_ENTRY:
            shown = name_buf if name_buf else "(Anonymous)"
            draw_panel(screen, ["Enter your name", shown + "_", "ENTER submit"], font)
        elif state == LEADERBOARD:
            rows = [f"{i + 1:>2}. {e.name:<15} {e.score:>6}" for i, e in enumerate(store.load())]
            if not rows:
                rows = ["No scores yet"]
            footer = "Clear all scores? Y / N" if confirm_clear else "R play | C clear | ESC quit"
            draw_panel(screen, ["LEADERBOARD"] + rows + [footer], font, top=60)

        pygame.display.flip()


if __name__ == "__main__":
    run()
