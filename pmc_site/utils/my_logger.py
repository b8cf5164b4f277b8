import functools
import logging
import os
import sys

from pmc_site.config import config_instance
from pmc_site.utils.utils import is_development


class AppLogger:
    def __init__(self, name: str, is_file_logger: bool = False, log_level: int = logging.INFO):
        logger_name = name if name else "pmc-site"
        self.logger = logging.getLogger(logger_name)
        self.logger.setLevel(level=log_level)

        if is_file_logger:
            logging_file = os.path.join('logs', config_instance().LOGGING.filename)
            os.makedirs(os.path.dirname(logging_file), exist_ok=True)
            handler = logging.FileHandler(logging_file)
        else:
            handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        self.logger.addHandler(handler)


@functools.lru_cache
def init_logger(name: str = "pmc-site"):
    """
        logs go to stdout on the development host or when no log file is configured
    :param name:
    :return:
    """
    use_file = bool(config_instance().LOGGING.filename) and not is_development(config_instance=config_instance)
    logger = AppLogger(name=name, is_file_logger=use_file, log_level=logging.INFO)
    return logger.logger


def log_submission(logger: logging.Logger, form: dict[str, str | None]) -> None:
    logger.info(f"""
    New Contact Form Submission
        Name: {form.get('name')}
        Email: {form.get('email')}
        Subject: {form.get('subject')}
        Message: {form.get('message')}
    """)
