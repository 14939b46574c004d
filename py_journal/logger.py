import logging
import os

LOG_FILE_NAME = "journal.log"
LOGGER_NAME = "journal"


def get_journal_logger(log_dir: str = "logs") -> logging.Logger:
    """
    Returns the journal logger with a file handler attached.
    Logs to <log_dir>/journal.log. Child loggers ("journal.engine", ...)
    used by the library modules end up here as well.
    """
    logger = logging.getLogger(LOGGER_NAME)

    # Avoid adding handlers multiple times
    if logger.handlers:
        return logger

    os.makedirs(log_dir, exist_ok=True)
    logger.setLevel(logging.INFO)

    file_handler = logging.FileHandler(os.path.join(log_dir, LOG_FILE_NAME), mode='a', encoding='utf-8')
    file_handler.setLevel(logging.INFO)

    formatter = logging.Formatter('%(asctime)s - %(message)s', datefmt='%Y-%m-%d %H:%M:%S')
    file_handler.setFormatter(formatter)

    logger.addHandler(file_handler)
    logger.propagate = False # Do not propagate to root logger (avoid stdout)

    return logger


def log_event(actor: str, message: str):
    """
    Helper to log an event in a consistent format.
    Actors: USER, BOT, ENGINE, SYSTEM
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.info(f"[{actor}] {message}")

    for handler in logger.handlers:
        handler.flush()
