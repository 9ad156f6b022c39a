import json
import logging
from typing import Any, Dict


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        log_data: Dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
        }

        if hasattr(record, "error_code"):
            log_data["error_code"] = record.error_code

        if hasattr(record, "details"):
            log_data["details"] = record.details

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def setup_logging(level: str = "INFO", json_output: bool = True) -> None:
    logger = logging.getLogger()
    for handler in list(logger.handlers):
        if getattr(handler, "_flashdeck_handler", False):
            logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler._flashdeck_handler = True
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
