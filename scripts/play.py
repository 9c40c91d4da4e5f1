
import argparse
import logging
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from cattetris.errors import InvalidPlacement, SessionTerminated
from cattetris.records import JsonLeaderboardStore, RecordPublisher
from cattetris.render import render_ansi
from cattetris.savegame import (clear_game_state, load_best_score, load_game_state,
                                save_best_score, save_game_state)
from cattetris.session import GameSession

HELP = """Commands:
  <slot> <x> <y>          place piece in slot at anchor (x, y)
  preview <slot> <x> <y>  show what would clear
  new                     start a new game
  top                     show the family leaderboard
  quit                    save and exit"""


def parse_move(session: GameSession, parts):
    slot, x, y = (int(p) for p in parts)
    if not 0 <= slot < len(session.active_set):
        raise ValueError(f"No piece in slot {slot}")
    return session.active_set[slot].instance_id, x, y


def main():
    parser = argparse.ArgumentParser(description='Play Cat Tetris in the terminal')
    parser.add_argument('--player', type=str, default='Player', help='Name on the leaderboard')
    parser.add_argument('--family_id', type=int, default=0, help='Leaderboard family id')
    parser.add_argument('--data_dir', type=str, default='outputs/cattetris', help='Save/leaderboard directory')
    parser.add_argument('--fresh', action='store_true', help='Ignore any saved game')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    data_dir = Path(args.data_dir)
    save_path = data_dir / "savegame.json"
    best_path = data_dir / "best_score.txt"

    store = JsonLeaderboardStore(str(data_dir / "leaderboard.json"), family_id=args.family_id)
    publisher = RecordPublisher(store, args.player)
    session = GameSession(on_game_over=publisher)

    if not args.fresh and load_game_state(session, str(save_path)):
        print("Resumed saved game.")

    print(f"\n{'='*40}")
    print("CAT TETRIS")
    print(f"{'='*40}")
    print(f"Best score: {load_best_score(str(best_path))}")
    print(HELP)

    while True:
        print()
        print(session.render())
        try:
            line = input("> ").strip()
        except EOFError:
            line = "quit"
        parts = line.split()
        if not parts:
            continue

        cmd = parts[0].lower()
        if cmd in ("quit", "q", "exit"):
            if session.running:
                save_game_state(session, str(save_path))
            break
        if cmd == "new":
            session.start_new_session()
            clear_game_state(str(save_path))
            continue
        if cmd == "top":
            for i, r in enumerate(store.family_records(limit=10), 1):
                print(f"  {i:>2}. {r['player_name']:<15} {r['score']:>6}  level {r['level']}")
            continue

        try:
            if cmd == "preview":
                move = parse_move(session, parts[1:4])
                print(render_ansi(session.snapshot(), preview=session.preview_clear(*move)))
                continue
            move = parse_move(session, parts[:3])
            result = session.attempt_placement(*move)
        except (ValueError, InvalidPlacement) as e:
            print(f"Invalid move: {e}")
            continue
        except SessionTerminated as e:
            print(f"{e}. Type 'new' to play again.")
            continue

        if result.lines:
            print(f"Cleared {result.lines} line(s): +{result.score_delta}")

        if result.game_over:
            stats = session.game_over_stats()
            print(session.render())
            print(f"\nGame over! Score {stats.score}, level {stats.level}, "
                  f"{stats.lines_cleared} lines in {stats.game_duration_seconds}s")
            if save_best_score(str(best_path), stats.score):
                print("New personal best!")
            clear_game_state(str(save_path))
        else:
            save_game_state(session, str(save_path))

    publisher.wait(timeout=5.0)
    print("\nBye!")


if __name__ == "__main__":
    main()
