import logging

from .constants import ROOT_PACKAGE_NAME

logger = logging.getLogger(ROOT_PACKAGE_NAME)


def get_logger(name: str) -> logging.Logger:
    if name == ROOT_PACKAGE_NAME or name.startswith(f"{ROOT_PACKAGE_NAME}."):
        return logging.getLogger(name)
    return logger.getChild(name)


def configure_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.INFO
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.handlers = [handler]
    logger.setLevel(level)
    logger.propagate = False
