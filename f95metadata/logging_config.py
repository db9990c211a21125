import logging
import os
import sys

from logging.handlers import RotatingFileHandler

LOGGER_NAME = "f95metadata"
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(name)s - %(module)s - %(message)s'
LOG_MAX_BYTES = 5 * 1024 * 1024
LOG_BACKUP_COUNT = 5

# Library modules log through this; nothing is emitted until an entry point calls setup_logging()
logger = logging.getLogger(LOGGER_NAME)
logger.addHandler(logging.NullHandler())


def _has_output_handlers(target):
    return any(not isinstance(handler, logging.NullHandler) for handler in target.handlers)


def setup_logging(log_file_path=None, level=None):
    """
    Attaches a rotating log file and the console to the package logger.
    log_file_path defaults to LOG_FILE_PATH from the environment, then ./logs/f95metadata.log.
    level defaults to LOG_LEVEL from the environment, then INFO.
    """
    log_file_path = log_file_path or os.getenv("LOG_FILE_PATH") or os.path.join(os.getcwd(), "logs", "f95metadata.log")
    level = (level or os.getenv("LOG_LEVEL", "INFO")).upper()
    logger.setLevel(getattr(logging, level, logging.INFO))

    # Repeated calls keep the handlers from the first one
    if _has_output_handlers(logger):
        return logger

    formatter = logging.Formatter(LOG_FORMAT)

    log_dir = os.path.dirname(os.path.abspath(log_file_path))
    try:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file_path,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding='utf-8',
            delay=True
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    except OSError as e:
        print(f"Failed to set up file logging in {log_dir}: {e}")

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # Silence excessively verbose loggers
    logging.getLogger("urllib3").setLevel(logging.WARNING)
    logging.getLogger("werkzeug").setLevel(logging.WARNING)

    return logger
