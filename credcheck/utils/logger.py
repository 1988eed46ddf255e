import logging
import os
from logging.handlers import RotatingFileHandler
from config.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(name='credcheck', log_file=None, level=None):
    """Configure the application logger once per process.

    Module loggers from ``get_logger(__name__)`` live under ``credcheck.*``
    and propagate here. An empty ``LOG_FILE`` keeps output on the console only.
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (level or Config.LOG_LEVEL).upper(), logging.INFO))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(LOG_FORMAT, datefmt='%Y-%m-%d %H:%M:%S')

    log_file = Config.LOG_FILE if log_file is None else log_file
    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)

        # 10MB x 10 files
        file_handler = RotatingFileHandler(log_file, maxBytes=10 * 1024 * 1024, backupCount=10)
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    return logger


def get_logger(name=None):
    """Get logger instance"""
    return logging.getLogger(name or 'credcheck')


# Create default logger
logger = setup_logger()
