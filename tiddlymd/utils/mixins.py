from typing import cast

import structlog


class LoggerMixin:
    """Gives a class a structlog logger named after it"""

    logger_name: str | None = None

    @property
    def logger(self) -> structlog.stdlib.BoundLogger:
        name = self.logger_name or self.__class__.__name__
        return cast("structlog.stdlib.BoundLogger", structlog.get_logger(name))
