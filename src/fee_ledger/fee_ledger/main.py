from __future__ import annotations

import importlib
import logging

from dotenv import load_dotenv
from flask import Flask

from config import get_settings_module

from .container import STORE_MYSQL, build_container
from .database.bootstrap import apply_schema, list_tables
from .fees.controller import register as register_fees

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings_module: str | None = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = settings_module or get_settings_module()
    settings = importlib.import_module(settings_module)
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"))

    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.config["DEFAULT_CURRENCY"] = getattr(settings, "DEFAULT_CURRENCY", "USD")

    store = getattr(settings, "FEE_STORE", STORE_MYSQL)
    db_config = getattr(settings, "DB_CONFIG", None)
    logger.info("settings=%s store=%s", settings_module, store)

    if store == STORE_MYSQL and bool(getattr(settings, "AUTO_INIT_DB", False)):
        apply_schema(db_config)
        logger.info("schema ready (tables=%d)", len(list_tables(db_config)))

    container = build_container(store=store, db_config=db_config)
    app.extensions["fee_ledger"] = container

    register_fees(app, container)

    return app
