import json
import logging
from datetime import datetime, timezone

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per line: timestamp (UTC ISO8601), level, name, message."""

    def format(self, record):
        record_dict = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "name": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            record_dict["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(record_dict)


def setup_logging(level="INFO", fmt="", datefmt="%Y-%m-%d %H:%M:%S"):
    """Configure the root logger; ``fmt="json"`` switches to JSON lines."""
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.handlers.clear()
    handler = logging.StreamHandler()
    if fmt.lower() == "json":
        handler.setFormatter(JSONFormatter(datefmt=datefmt))
    else:
        handler.setFormatter(logging.Formatter(fmt or DEFAULT_FORMAT, datefmt=datefmt))
    root.addHandler(handler)
    root.setLevel(level)
