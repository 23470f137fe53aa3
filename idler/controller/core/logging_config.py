import logging
import os

from idler.common.core.logging_config import setup_logging as common_setup_logging


def setup_logging(write_debug: bool = False):
    """
    Load the YAML config and initialize logging.
    With write_debug, the controller loggers emit DEBUG records.
    """
    config_path = os.getenv("LOG_CONFIG_PATH", "/app/config/idler_log.yaml")
    common_setup_logging(config_path)

    if write_debug:
        logging.getLogger("idler").setLevel(logging.DEBUG)
