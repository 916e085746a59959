"""Uvicorn server runner."""

import structlog
import uvicorn
from uvicorn.config import LOGGING_CONFIG

from eduregistry.app import App
from eduregistry.config import Config
from eduregistry.web.server import create_fastapi_app

logger = structlog.get_logger(__name__)


def build_log_config(debug: bool) -> dict:
    """Uvicorn logging config with timestamps; access lines only in debug mode."""
    log_config = {**LOGGING_CONFIG, "formatters": {k: dict(v) for k, v in LOGGING_CONFIG["formatters"].items()}}
    log_config["formatters"]["access"]["fmt"] = '%(asctime)s - "%(request_line)s" %(status_code)s'
    log_config["formatters"]["default"]["fmt"] = "%(asctime)s - %(levelname)s - %(message)s"
    log_config["loggers"] = {**LOGGING_CONFIG["loggers"], "uvicorn.access": {**LOGGING_CONFIG["loggers"]["uvicorn.access"]}}
    log_config["loggers"]["uvicorn.access"]["level"] = "INFO" if debug else "WARNING"
    return log_config


def run_server(app: App, config: Config) -> None:
    fastapi_app = create_fastapi_app(app, config)
    logger.info("server_starting", host=config.host, port=config.port, debug=config.debug)
    uvicorn.run(
        fastapi_app,
        host=config.host,
        port=config.port,
        log_config=build_log_config(config.debug),
        access_log=config.debug,
        proxy_headers=True,
    )
