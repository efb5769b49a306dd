#!/usr/bin/env python3
"""
Cubesweeper - command line entry point.

Usage:
    python main.py evaluate [--agent {random,logic}] [--difficulty D] [--games N] [--store PATH]
    python main.py compare [--difficulty D] [--games N] [--store PATH]
    python main.py scores [--store PATH]
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from cubesweeper import ConfigurationError, Difficulty, GameSettings, GridConfig
from cubesweeper.logging_config import setup_logging
from cubesweeper.score_store import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    ScoreStore,
)
from agents import BaseAgent, LogicAgent, RandomAgent
from evaluation import Evaluator

DEFAULT_STORE = Path("scores.json")


def _make_agent(name: str, config: GridConfig, seed: Optional[int]) -> BaseAgent:
    if name == "random":
        return RandomAgent(config, seed=seed)
    return LogicAgent(config, seed=seed)


def _evaluation_store(path: Optional[Path]) -> ScoreStore:
    """Agent wins stay in memory unless a score file is named explicitly."""
    if path is None:
        return ScoreStore(InMemoryKeyValueStore())
    return ScoreStore(JsonFileKeyValueStore(path))


def _make_evaluator(args: argparse.Namespace) -> Evaluator:
    settings = GameSettings(cascade_probability=args.cascade)
    return Evaluator(
        difficulty=args.difficulty,
        num_episodes=args.games,
        settings=settings,
        score_store=_evaluation_store(args.store),
        seed=args.seed,
    )


def evaluate(args: argparse.Namespace) -> None:
    """Evaluate a single agent."""
    config = GridConfig(args.difficulty)
    agent = _make_agent(args.agent, config, args.seed)
    evaluator = _make_evaluator(args)

    print(f"\nEvaluating {args.agent} on {config.difficulty.label} over {args.games} games...")
    results = evaluator.evaluate(agent)

    print(f"Results for {args.agent}:")
    print(f"  Win rate: {results['win_rate']:.1%}")
    print(f"  Avg reward: {results['avg_reward']:.2f}")
    print(f"  Avg steps: {results['avg_steps']:.1f}")
    print(f"  Avg revealed: {results['avg_revealed']:.1f} cells")


def compare(args: argparse.Namespace) -> None:
    """Compare all agents."""
    config = GridConfig(args.difficulty)
    agents = {
        "Random": RandomAgent(config, seed=args.seed),
        "Logic": LogicAgent(config, seed=args.seed),
    }

    results = _make_evaluator(args).compare(agents)

    print("\n" + "=" * 50)
    print(f"Agent Comparison Results ({config.difficulty.label})")
    print("=" * 50)
    print(f"{'Agent':<20} {'Win Rate':<12} {'Avg Reward':<12} {'Avg Steps':<10}")
    print("-" * 50)

    for name, metrics in results.items():
        print(
            f"{name:<20} {metrics['win_rate']:>10.1%} "
            f"{metrics['avg_reward']:>10.2f} "
            f"{metrics['avg_steps']:>10.1f}"
        )


def scores(args: argparse.Namespace) -> None:
    """Show the best time for every difficulty."""
    store = ScoreStore(JsonFileKeyValueStore(args.store or DEFAULT_STORE))
    print("Best times")
    for level in Difficulty:
        print(f"  {level.label:<8} {store.format_best(level)}")


def build_parser() -> argparse.ArgumentParser:
    """Build the command line parser."""
    parser = argparse.ArgumentParser(
        description="Cubesweeper - volumetric Minesweeper rules engine"
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Shared by every command
    store_options = argparse.ArgumentParser(add_help=False)
    store_options.add_argument(
        "--store", type=Path, default=None,
        help=f"Best score file (scores defaults to {DEFAULT_STORE}, "
             "agent runs keep results in memory)",
    )

    def add_round_options(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--difficulty", type=Difficulty.parse, default=Difficulty.EASY,
            help="1/2/3 or easy/medium/hard",
        )
        sub.add_argument(
            "--games", type=int, default=100, help="Number of games to play"
        )
        sub.add_argument("--seed", type=int, default=None, help="Random seed")
        sub.add_argument(
            "--cascade", type=float, default=0.2,
            help="Cascade probability per hidden safe neighbor",
        )

    # Evaluate command
    eval_parser = subparsers.add_parser(
        "evaluate", help="Evaluate an agent", parents=[store_options]
    )
    eval_parser.add_argument(
        "--agent",
        choices=["random", "logic"],
        default="logic",
        help="Agent to evaluate",
    )
    add_round_options(eval_parser)

    # Compare command
    compare_parser = subparsers.add_parser(
        "compare", help="Compare all agents", parents=[store_options]
    )
    add_round_options(compare_parser)

    # Scores command
    subparsers.add_parser("scores", help="Show best times", parents=[store_options])

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Parse arguments and run the appropriate command."""
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(logging.DEBUG if args.verbose else logging.WARNING)

    try:
        if args.command == "evaluate":
            evaluate(args)
        elif args.command == "compare":
            compare(args)
        elif args.command == "scores":
            scores(args)
        else:
            parser.print_help()
    except ConfigurationError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
