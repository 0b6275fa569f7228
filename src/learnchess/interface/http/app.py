from __future__ import annotations

from flask import Flask

from src.learnchess.infrastructure.config import AppConfig, load_config
from src.learnchess.infrastructure.persistence.base import (
    create_engine_from_config,
    create_session_factory,
    init_schema,
)
from src.learnchess.infrastructure.rules import HeuristicOpponent
from src.learnchess.interface.http.gameplay_routes import gameplay_bp
from src.learnchess.interface.telemetry.logging import get_logger, setup_logging_from_config


def create_app(config: AppConfig | None = None) -> Flask:
    """Instantiate Flask application with shared configuration."""
    cfg = config or load_config()

    setup_logging_from_config(cfg)
    logger = get_logger("learnchess.app")

    app = Flask(__name__)
    app.config.update(
        DATABASE_URL=cfg.database_url,
        ENV=cfg.flask_env,
        DEFAULT_DIFFICULTY=cfg.default_difficulty,
        OPPONENT_DELAY_MS=cfg.opponent_delay_ms,
        APP_CONFIG=cfg,
    )

    engine = create_engine_from_config(cfg)
    init_schema(engine)
    app.config["SESSION_FACTORY"] = create_session_factory(engine)
    app.extensions["opponent"] = HeuristicOpponent(seed=cfg.opponent_seed)

    app.register_blueprint(gameplay_bp, url_prefix="/api/v1/sessions")

    @app.get("/healthz")
    def healthcheck():
        return {"status": "ok"}, 200

    logger.info(
        "flask_app_initialized",
        env=cfg.flask_env,
        default_difficulty=cfg.default_difficulty,
        opponent_delay_ms=cfg.opponent_delay_ms,
    )
    return app


__all__ = ["create_app"]
