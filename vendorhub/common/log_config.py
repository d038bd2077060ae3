"""
Logging Configuration

One stderr handler on the vendorhub package logger, shared by the API and the
maintenance scripts. Stdout stays free for script reports.
"""

import logging
import sys

LOGGER_NAME = "vendorhub"
SQL_LOGGER_NAME = "sqlalchemy.engine"
LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False, sql: bool = False) -> None:
    """
    Configure logging for the application.

    Args:
        verbose: DEBUG level instead of INFO
        quiet: WARNING level instead of INFO
        sql: Also print the SQL statements SQLAlchemy emits
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    # Calling twice (app factory + tests) must not double every line
    logger.handlers.clear()
    logger.addHandler(handler)

    sql_logger = logging.getLogger(SQL_LOGGER_NAME)
    sql_logger.handlers.clear()
    if sql:
        sql_logger.setLevel(logging.INFO)
        sql_logger.addHandler(handler)
    else:
        sql_logger.setLevel(logging.WARNING)
