"""Logging utilities for the replication handlers.

Structured JSON logging through AWS Lambda Powertools, with the service
logger's handler shared with the root logger so that module level
loggers (boto3, botocore, the store wrappers) use the same format.
"""

import logging
from typing import Optional

from aibs_informatics_core.utils.logging import get_all_handlers
from aws_lambda_powertools.logging import Logger

from ssm_parameter_replicator.common.base import HandlerMixins

SERVICE_NAME = "ssm-parameter-replicator"


class LoggingMixins(HandlerMixins):
    """Mixin class providing a Powertools logger.

    Attributes:
        log: Alias for the logger property.
        logger: The AWS Lambda Powertools Logger instance.
    """

    @property
    def log(self) -> Logger:
        return self.logger

    @log.setter
    def log(self, value: Logger):
        self.logger = value

    @property
    def logger(self) -> Logger:
        """Get the Logger instance, creating one for this service if needed."""
        try:
            return self._logger
        except AttributeError:
            self.logger = self.get_logger(self.service_name())
        return self.logger

    @logger.setter
    def logger(self, value: Logger):
        self._logger = value

    @classmethod
    def get_logger(cls, service: Optional[str] = None, add_to_root: bool = False) -> Logger:
        """Create a new Logger instance.

        Args:
            service (Optional[str]): The service name for the logger. If None, uses default.
            add_to_root (bool): Whether to add the logger handler to the root logger.

        Returns:
            A configured Logger instance.
        """
        return get_service_logger(service=service, add_to_root=add_to_root)

    def add_logger_to_root(self):
        """Share this handler's log handler with the root logger."""
        add_handler_to_logger(self.logger)


def get_service_logger(service: Optional[str] = None, add_to_root: bool = False) -> Logger:
    """Create a service logger with optional root logger integration.

    Args:
        service (Optional[str]): The service name for the logger. If None, uses default.
        add_to_root (bool): Whether to add the logger handler to the root logger.

    Returns:
        A configured Logger instance for the service.
    """
    service_logger = Logger(service=service or SERVICE_NAME)
    if add_to_root:
        add_handler_to_logger(service_logger)
    return service_logger


def add_handler_to_logger(source_logger: Logger, target_logger: Optional[logging.Logger] = None):
    """Add a source logger's handler to a target logger.

    The root logger is the default target. Its level is lowered to the
    source logger's level so that module loggers are not filtered out first.

    Args:
        source_logger (Logger): The Logger whose handler will be copied.
        target_logger (Optional[logging.Logger]): The logger to receive the handler.
            Defaults to the root logger.
    """
    handler = source_logger.registered_handler

    if target_logger is None:
        target_logger = logging.getLogger()
        log_level = min(source_logger.log_level, target_logger.getEffectiveLevel())
        target_logger.setLevel(log_level)

    if handler not in get_all_handlers(target_logger):
        target_logger.addHandler(handler)
