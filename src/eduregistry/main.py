"""Command-line entry point: `eduregistry` starts the API server."""

from eduregistry.app import App
from eduregistry.config import Config
from eduregistry.logging import setup_logging
from eduregistry.web.runner import run_server


def main() -> None:
    config = Config()  # type: ignore[call-arg]  # Required fields come from the environment
    setup_logging(config.debug)
    run_server(App(config), config)


if __name__ == "__main__":
    main()
