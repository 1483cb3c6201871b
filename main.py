"""
main.py — Bootstrap

1. Parse the command line
2. Load tuning and level data (fail fast on bad level files)
3. Create the session, the app and the sound board
4. Push the game scene
5. Run
"""

import argparse
import sys

from core import tuning
from core.app import App
from core.audio import SoundBoard
from core.data import LevelDataError, load_levels
from logic.physics import PhysicsConfig
from logic.session import GameSession
from scenes.game_scene import GameScene


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Mia's Adventure")
    parser.add_argument("--level", type=int, default=None,
                        help="skip the menu and start at level N (1-based)")
    parser.add_argument("--seed", type=int, default=None,
                        help="seed for the cosmetic random state (key swing phase)")
    parser.add_argument("--mute", action="store_true", help="start with sound off")
    parser.add_argument("--levels", default=None, help="path to a levels.toml file")
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    # -- Data --
    tuning.load()
    try:
        levels = load_levels(args.levels)
    except LevelDataError as exc:
        print(f"[MAIN] cannot start: {exc}")
        sys.exit(1)

    # -- Session --
    session = GameSession(levels, physics=PhysicsConfig.from_tuning(), seed=args.seed)
    session.muted = args.mute

    # -- Window & audio --
    app = App()
    sound = SoundBoard(session.bus, muted=args.mute)

    start = args.level - 1 if args.level is not None else None
    print(f"[MAIN] {len(levels)} levels, seed={args.seed}, start={args.level or 'menu'}")
    app.push_scene(GameScene(session, sound, start_level=start))
    app.run()


if __name__ == "__main__":
    main()
