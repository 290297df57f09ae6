import logging.config
import os

LOG_PATH = os.path.join(os.path.expanduser("~"), ".tokenartisan", "tokenartisan.log")


def build_logging_config(log_path: str = LOG_PATH, console_level: str = "DEBUG") -> dict:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "console_formatter": {"format": "%(asctime)s - %(levelname)s - %(message)s"},
            "file_formatter": {"format": "%(asctime)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s"},
        },
        "handlers": {
            "consoleHandler": {
                "class": "logging.StreamHandler",
                "level": console_level,
                "formatter": "console_formatter",
                "stream": "ext://sys.stdout",
            },
            "fileHandler": {
                "class": "logging.FileHandler",
                "level": "ERROR",
                "formatter": "file_formatter",
                "filename": log_path,
                # only errors are written, don't create the file until one happens
                "delay": True,
            },
        },
        "loggers": {
            "": {
                "level": "DEBUG",
                "handlers": ["consoleHandler", "fileHandler"],
            },
        },
    }


logging_config = build_logging_config()


def configure_logging(log_path: str = LOG_PATH, console_level: str = "DEBUG"):
    os.makedirs(os.path.dirname(log_path), exist_ok=True)
    logging.config.dictConfig(build_logging_config(log_path, console_level))
