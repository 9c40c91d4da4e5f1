import argparse
import csv
import json
import logging
import random
import time
from pathlib import Path
from typing import Dict
import numpy as np

import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from cattetris.agents import get_agent
from cattetris.session import GameSession


def run_agent(agent, num_games: int, seed: int, max_moves: int = 5000) -> Dict:
    scores = []
    moves_list = []
    game_data = []

    for game in range(num_games):
        session = GameSession(rng=random.Random(seed + game))
        agent.reset()
        moves = 0

        while session.running and moves < max_moves:
            move = agent.select_action(session)
            if move is None:
                break
            session.attempt_placement(*move)
            moves += 1

        stats = session.game_over_stats()
        scores.append(stats.score)
        moves_list.append(moves)
        game_data.append({
            'game': game,
            'score': stats.score,
            'level': stats.level,
            'lines': stats.lines_cleared,
            'moves': moves,
        })

        if (game + 1) % 10 == 0:
            print(f"  {agent.name}: Game {game + 1}/{num_games}, "
                  f"Avg Score: {np.mean(scores):.1f}")

    return {
        'agent': agent.name,
        'scores': scores,
        'moves': moves_list,
        'mean_score': float(np.mean(scores)),
        'std_score': float(np.std(scores)),
        'max_score': int(max(scores)),
        'min_score': int(min(scores)),
        'median_score': float(np.median(scores)),
        'mean_moves': float(np.mean(moves_list)),
        'games': game_data
    }


def main():
    parser = argparse.ArgumentParser(description='Compare Cat Tetris baseline agents')
    parser.add_argument('--games', type=int, default=50, help='Games per agent')
    parser.add_argument('--seed', type=int, default=0, help='Seed of the first game')
    parser.add_argument('--run_name', type=str, default='compare', help='Run name for outputs')
    parser.add_argument('--agents', type=str, nargs='+',
                        default=['validrandom', 'greedy', 'maxclear'],
                        help='Agents to compare')

    args = parser.parse_args()
    logging.basicConfig(level=logging.WARNING)

    print(f"\n{'='*60}")
    print(f"CAT TETRIS - AGENT COMPARISON")
    print(f"{'='*60}")
    print(f"Games per agent: {args.games}")
    print(f"Agents: {args.agents}")
    print(f"Run name: {args.run_name}")
    print(f"{'='*60}\n")

    logs_dir = Path("outputs") / "logs" / args.run_name
    logs_dir.mkdir(parents=True, exist_ok=True)

    all_results = []
    start_time = time.time()

    for agent_name in args.agents:
        print(f"\nRunning {agent_name}...")
        agent = get_agent(agent_name, rng=random.Random(args.seed))
        results = run_agent(agent, args.games, args.seed)
        all_results.append(results)

        print(f"  {agent_name}: Mean={results['mean_score']:.1f} "
              f"Max={results['max_score']} Median={results['median_score']:.1f}")

    elapsed = time.time() - start_time
    print(f"\nTotal time: {elapsed:.1f}s")

    print(f"\n{'='*60}")
    print(f"RESULTS SUMMARY")
    print(f"{'='*60}")
    print(f"{'Agent':<15} {'Mean':>10} {'Std':>10} {'Max':>8} {'Median':>10} {'Moves':>8}")
    print(f"{'-'*60}")

    for r in all_results:
        print(f"{r['agent']:<15} {r['mean_score']:>10.1f} {r['std_score']:>10.1f} "
              f"{r['max_score']:>8} {r['median_score']:>10.1f} {r['mean_moves']:>8.1f}")

    print(f"{'='*60}\n")

    csv_path = logs_dir / "compare.csv"
    with open(csv_path, 'w', newline='') as f:
        writer = csv.writer(f)
        writer.writerow(['agent', 'mean_score', 'std_score', 'max_score',
                         'min_score', 'median_score', 'mean_moves'])
        for r in all_results:
            writer.writerow([
                r['agent'], r['mean_score'], r['std_score'], r['max_score'],
                r['min_score'], r['median_score'], r['mean_moves']
            ])
    print(f"Saved: {csv_path}")

    json_path = logs_dir / "compare_detailed.json"
    with open(json_path, 'w') as f:
        json.dump(all_results, f, indent=2)
    print(f"Saved: {json_path}")

    print("\nDone!")


if __name__ == "__main__":
    main()
