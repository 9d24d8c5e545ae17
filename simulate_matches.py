"""
Simulation script to inspect score balance across many headless matches.

Plays seeded marathon and 4-player VS matches against the scoring core and
prints score, combo and chain statistics per mode.
"""

import statistics

import numpy as np
from tqdm import tqdm

from puzzleattack.match.match_config import GameModeFactory
from puzzleattack.simulation.match_simulator import MatchResult, MatchSimulator


def run_matches(humans: list[bool], num_matches: int, base_seed: int, label: str) -> list[MatchResult]:
    results = []
    for i in tqdm(range(num_matches), desc=label):
        mode = GameModeFactory.marathon() if len(humans) == 1 else GameModeFactory.vs_cpu()
        simulator = MatchSimulator(humans, mode=mode, seed=base_seed + i)
        results.append(simulator.run())
    return results


def summarize(label: str, results: list[MatchResult]):
    scores = np.array([score for r in results for score in r.scores.values()])
    combos = np.array([combo for r in results for combo in r.highest_combos.values()])
    chains = np.array([chain for r in results for chain in r.highest_chains.values()])
    ticks = [r.ticks for r in results]
    outcomes = {}
    for r in results:
        outcomes[r.outcome] = outcomes.get(r.outcome, 0) + 1

    print(f"\n{label}")
    print("=" * 60)
    print(f"Matches:          {len(results)}")
    print(f"Outcomes:         {outcomes}")
    print(f"Match length:     {statistics.mean(ticks):.0f} ticks (median {statistics.median(ticks):.0f})")
    print(f"Score:            mean {scores.mean():.0f}, p90 {np.percentile(scores, 90):.0f}, max {scores.max()}")
    print(f"Highest combo:    mean {combos.mean():.1f}, max {combos.max()}")
    print(f"Highest chain:    mean {chains.mean():.1f}, max {chains.max()}")

    winners = [r.winner_index for r in results if r.winner_index is not None]
    if winners:
        counts = np.bincount(winners, minlength=4)
        print(f"Wins per slot:    {counts.tolist()}")


def main():
    marathon = run_matches([True], num_matches=200, base_seed=1000, label="Marathon")
    versus = run_matches([True, False, False, False], num_matches=200, base_seed=5000, label="VS CPU x4")

    summarize("Marathon", marathon)
    summarize("VS CPU (4 players)", versus)


if __name__ == "__main__":
    main()
