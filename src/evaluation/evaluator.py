"""
Agent evaluation for cubesweeper.

Plays rounds through the gymnasium environment and aggregates results.
"""
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional

from cubesweeper.config import Difficulty, GameSettings
from cubesweeper.environment import CubesweeperEnv
from cubesweeper.score_store import ScoreStore

from agents.base_agent import BaseAgent

logger = logging.getLogger(__name__)


# ============================================================================
# Episode Statistics
# ============================================================================

@dataclass
class EpisodeStats:
    """Statistics for a single round."""

    total_reward: float = 0.0
    steps: int = 0
    won: bool = False
    revealed_cells: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_reward": self.total_reward,
            "steps": self.steps,
            "won": self.won,
            "revealed_cells": self.revealed_cells,
        }


# ============================================================================
# Agent Evaluator
# ============================================================================

class Evaluator:
    """
    Evaluate and compare multiple agents.

    Every agent plays the same sequence of seeded rounds, so results are
    comparable and reproducible.
    """

    def __init__(
        self,
        difficulty: Difficulty = Difficulty.EASY,
        num_episodes: int = 100,
        max_steps: Optional[int] = None,
        settings: Optional[GameSettings] = None,
        score_store: Optional[ScoreStore] = None,
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize the evaluator.

        Args:
            difficulty: Difficulty of every round.
            num_episodes: Number of evaluation rounds.
            max_steps: Maximum steps per round; one per cell if omitted.
            settings: Round settings.
            score_store: Best-score store fed by won rounds.
            seed: Base seed; round ``i`` uses ``seed + i``.
        """
        self.difficulty = Difficulty.parse(difficulty)
        self.num_episodes = num_episodes
        self.max_steps = max_steps
        self.settings = settings or GameSettings()
        self.score_store = score_store or ScoreStore()
        self.seed = seed

    def _run_episode(
        self, env: CubesweeperEnv, agent: BaseAgent, episode: int
    ) -> EpisodeStats:
        """Play one round to completion or the step limit."""
        stats = EpisodeStats()
        seed = None if self.seed is None else self.seed + episode
        observation, _ = env.reset(seed=seed)
        agent.reset()

        max_steps = self.max_steps or env.config.total_cells
        for _ in range(max_steps):
            valid_actions = env.get_action_mask()
            action = agent.select_action(observation, valid_actions)
            observation, reward, terminated, truncated, info = env.step(action)

            stats.total_reward += reward
            stats.steps += 1
            stats.revealed_cells = info.get("revealed", 0)

            if terminated or truncated:
                stats.won = info.get("game_state") == "WON"
                break

        return stats

    def evaluate(self, agent: BaseAgent) -> Dict[str, float]:
        """
        Evaluate a single agent.

        Args:
            agent: Agent to evaluate.

        Returns:
            Dictionary with evaluation metrics.
        """
        env = CubesweeperEnv(
            difficulty=self.difficulty,
            settings=self.settings,
            score_store=self.score_store,
            seed=self.seed,
        )

        wins = 0
        total_reward = 0.0
        total_steps = 0
        total_revealed = 0

        for episode in range(self.num_episodes):
            stats = self._run_episode(env, agent, episode)
            wins += int(stats.won)
            total_reward += stats.total_reward
            total_steps += stats.steps
            total_revealed += stats.revealed_cells

        return {
            "win_rate": wins / self.num_episodes,
            "avg_reward": total_reward / self.num_episodes,
            "avg_steps": total_steps / self.num_episodes,
            "avg_revealed": total_revealed / self.num_episodes,
        }

    def compare(
        self, agents: Dict[str, BaseAgent]
    ) -> Dict[str, Dict[str, float]]:
        """
        Compare multiple agents.

        Args:
            agents: Dictionary of agent_name -> agent.

        Returns:
            Dictionary of agent_name -> evaluation metrics.
        """
        results = {}
        for name, agent in agents.items():
            logger.info("Evaluating %s...", name)
            results[name] = self.evaluate(agent)
        return results
