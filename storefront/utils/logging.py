# storefront/utils/logging.py
import logging
import sys

from storefront.utils.settings import LOG_LEVEL

ROOT_LOGGER = "storefront"

_configured = False


def _configure() -> None:
    global _configured
    if _configured:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s [%(name)s] %(message)s")
    )

    root = logging.getLogger(ROOT_LOGGER)
    root.addHandler(handler)
    root.setLevel(LOG_LEVEL)
    root.propagate = False

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Logger under the storefront namespace, configured on first use."""
    _configure()
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)
