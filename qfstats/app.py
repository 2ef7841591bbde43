"""
app.py
------

Flask application exposing read-only trade statistics computed from a
local QuantFrame SQLite database. It mirrors a subset of the hosted
QuantFrame API so the desktop client can be pointed at it instead.

Endpoints:
    GET /stats/users   -> profit/revenue metrics grouped by user
    GET /stats/rivens  -> profit/revenue metrics grouped by riven name

To run the application:
    1. Install the package (`pip install .`).
    2. Optionally set PORT and QUANTFRAME_DB_PATH.
    3. Execute `qfstats` (or `python -m qfstats`).

The database is opened once, read-only, at startup. If it cannot be
opened the process exits with status 1 before serving anything.
"""
import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional

from flask import Flask, jsonify

from .analytics import riven_statistics, user_statistics
from .database import TransactionStore
from .errors import QFStatsError
from .models import GroupStats

logger = logging.getLogger(__name__)

DEFAULT_PORT = 3000
DB_FILE_NAME = "quantframeV2.sqlite"


def default_db_path() -> str:
    """Location of the database in a standard QuantFrame installation."""
    home = os.getenv("HOME") or os.getenv("USERPROFILE") or ""
    return str(Path(home) / "AppData" / "Local" / "dev.kenya.quantframe" / DB_FILE_NAME)


def configured_db_path() -> str:
    return os.getenv("QUANTFRAME_DB_PATH") or default_db_path()


@dataclass
class Config:
    port: int
    db_path: str
    log_level: str = "INFO"


def load_config() -> Config:
    """Read process configuration from the environment."""
    raw_port = os.getenv("PORT") or str(DEFAULT_PORT)
    try:
        port = int(raw_port)
    except ValueError:
        raise QFStatsError(f"PORT must be an integer, got {raw_port!r}")
    return Config(
        port=port,
        db_path=configured_db_path(),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def create_app(store: Optional[TransactionStore] = None) -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False
    if store is None:
        store = TransactionStore(configured_db_path())
    app.config["TRANSACTION_STORE"] = store

    def _stats_response(build: Callable[[list], List[GroupStats]], key_field: str):
        try:
            transactions = app.config["TRANSACTION_STORE"].list_transactions()
            data = [s.to_dict(key_field) for s in build(transactions)]
        except Exception as e:
            logger.exception("Failed to compute %s statistics", key_field)
            return jsonify({"error": str(e)}), 500
        return jsonify(data)

    # ---------- routes ----------
    @app.route("/stats/users", methods=["GET"])
    def stats_users():
        return _stats_response(user_statistics, "user")

    @app.route("/stats/rivens", methods=["GET"])
    def stats_rivens():
        return _stats_response(riven_statistics, "riven")

    return app


def main() -> None:
    try:
        config = load_config()
    except QFStatsError as e:
        logging.basicConfig(level=logging.INFO)
        logger.error("Invalid configuration: %s", e)
        sys.exit(1)

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        store = TransactionStore(config.db_path)
    except QFStatsError as e:
        logger.error("Failed to open database: %s", e)
        sys.exit(1)
    logger.info("Connected to QuantFrame database at %s", config.db_path)

    app = create_app(store)
    logger.info("Analytics server listening on http://localhost:%d", config.port)
    app.run(host="0.0.0.0", port=config.port, debug=False, use_reloader=False)


# Run directly
if __name__ == "__main__":
    main()
