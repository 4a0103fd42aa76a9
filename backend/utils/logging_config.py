"""
Logging setup shared by the app and the maintenance scripts.
"""
import logging
import os
from logging.handlers import TimedRotatingFileHandler

from config import Config

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(logger_name=None, log_level=None, log_file="app.log"):
    """
    Configure a logger (the root logger by default) with a daily rotating
    file handler and a console handler. Calling it twice does not add
    duplicate handlers.
    """
    log_directory = Config.LOG_DIR
    os.makedirs(log_directory, exist_ok=True)
    log_filepath = os.path.join(log_directory, log_file)

    logger = logging.getLogger(logger_name)
    effective_log_level = (log_level or Config.LOG_LEVEL).upper()
    logger.setLevel(effective_log_level)

    if not logger.handlers:
        formatter = logging.Formatter(LOG_FORMAT)

        handler = TimedRotatingFileHandler(log_filepath, when="midnight", interval=1, backupCount=7, encoding="utf-8")
        handler.setFormatter(formatter)
        logger.addHandler(handler)

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # Reduce noise from the dev server
    logging.getLogger('werkzeug').setLevel(logging.INFO)

    return logger
