"""
LearnChess package bootstrap.

Subpackages:
- interface: Adapters for HTTP, CLI, and telemetry layers.
- domain: Move evaluation, opponent move selection, hints, and game sessions.
- infrastructure: python-chess rules adapter, persistence, and configuration.
"""

__all__ = ["interface", "domain", "infrastructure"]
