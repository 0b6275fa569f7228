from __future__ import annotations

import random

import pytest

from src.learnchess.domain.chess import SessionManager
from src.learnchess.infrastructure.config import AppConfig
from src.learnchess.infrastructure.persistence.game_session_repository import (
    InMemoryGameSessionRepository,
)
from src.learnchess.infrastructure.rules import HeuristicOpponent, PythonChessRules
from src.learnchess.interface.http.app import create_app


@pytest.fixture(scope="session")
def app_config() -> AppConfig:
    """Provide a configuration tuned for isolated tests."""
    return AppConfig(
        database_url="sqlite+pysqlite:///:memory:",
        flask_env="test",
        default_difficulty="medium",
        opponent_delay_ms=250,
        opponent_seed=7,
        additional={},
    )


@pytest.fixture
def rules() -> PythonChessRules:
    return PythonChessRules()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def session_manager() -> SessionManager:
    return SessionManager(InMemoryGameSessionRepository(), HeuristicOpponent(seed=11))


@pytest.fixture
def app(app_config: AppConfig):
    flask_app = create_app(app_config)
    flask_app.config.update(TESTING=True)
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()
