import logging

import click

from .config import DEFAULT_HOST, DEFAULT_PORT, Config
from .errors import EchoServerError
from .listener import Listener
from .logging_config import LOG_LEVELS, configure_logging

logger = logging.getLogger(__name__)


def run(host: str = DEFAULT_HOST, port=DEFAULT_PORT) -> None:
    """
    Build the config, start listening and serve forever. Errors are logged and
    swallowed here, so the process exits with status 0 either way.
    """
    try:
        config = Config(host=host, port=port)
        with Listener(config) as listener:
            listener.initialize()
            listener.run()
    except EchoServerError as exc:
        logger.error("Error: %s", exc)
    except KeyboardInterrupt:
        logger.info("Shutting down server!")


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("bind_address", default=DEFAULT_HOST, required=False)
@click.argument("port", default=str(DEFAULT_PORT), required=False)
@click.option(
    "--log-level",
    type=click.Choice(list(LOG_LEVELS.keys())),
    default="info",
    show_default=True,
    help="Log level. Use debug to print every received chunk.",
)
@click.option(
    "--use-colors/--no-use-colors",
    default=None,
    help="Enable/Disable colorized logging.",
)
def main(bind_address: str, port: str, log_level: str, use_colors: bool | None) -> None:
    """Echo every byte a TCP client sends back to it, one client at a time."""
    configure_logging(log_level, use_colors)
    run(bind_address, port)
