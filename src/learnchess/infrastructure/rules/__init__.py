"""python-chess backed implementations of the engine contracts."""

from .heuristic_opponent import HeuristicOpponent
from .python_chess_rules import PythonChessRules

__all__ = ["HeuristicOpponent", "PythonChessRules"]
