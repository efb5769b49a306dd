"""
Cubesweeper agents module.

Provides agents that play rounds through the gymnasium environment:
- RandomAgent: Baseline random selection
- LogicAgent: Constraint propagation over revealed counts
"""
from .base_agent import BaseAgent
from .random_agent import RandomAgent
from .logic_agent import LogicAgent

__all__ = [
    "BaseAgent",
    "RandomAgent",
    "LogicAgent",
]
