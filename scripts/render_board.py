
import argparse
import logging
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from cattetris.render import BoardRenderer, snapshot_summary
from cattetris.savegame import load_game_state
from cattetris.session import GameSession


def main():
    parser = argparse.ArgumentParser(description='Render a saved Cat Tetris game')
    parser.add_argument('--save', type=str, required=True, help='Path to savegame JSON')
    parser.add_argument('--out', type=str, required=True, help='Output PNG path')
    parser.add_argument('--cell_size', type=int, default=40, help='Cell size in pixels')

    args = parser.parse_args()
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    session = GameSession()
    if not load_game_state(session, args.save):
        print(f"Could not load {args.save}")
        sys.exit(1)

    snapshot = session.snapshot()
    summary = snapshot_summary(snapshot)
    print(f"Score: {summary['score']}  Level: {summary['level']}  "
          f"Lines: {summary['lines_cleared']}  Filled cells: {summary['filled']}")

    BoardRenderer(cell_size=args.cell_size).save_frame(snapshot, args.out)
    print(f"Saved: {args.out}")


if __name__ == "__main__":
    main()
