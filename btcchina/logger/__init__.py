import logging
from logging import CRITICAL, DEBUG, ERROR, INFO, WARNING

from .logger import BTCChinaLogger

NETWORK = DEBUG + 6
logging.addLevelName(NETWORK, "NETWORK")

logging.setLoggerClass(BTCChinaLogger)

__all__ = [
    "BTCChinaLogger",
    "CRITICAL",
    "DEBUG",
    "ERROR",
    "INFO",
    "NETWORK",
    "WARNING",
]
