import logging
import logging.config

from config import AppConfig


def setup_logger(app_config: AppConfig) -> logging.Logger:
    app_config.ensure_directories()
    logging.config.dictConfig(app_config.get_logging_config())
    logger = logging.getLogger("eunoia")
    logger.debug(f"Logging configured at {app_config.logging.level.value}")
    return logger
