import logging
import os
import re

# key=value pairs whose value must never reach a log line
_SENSITIVE_KV = re.compile(r"\b(\w*(?:password|token)\w*)=(\S+)", re.IGNORECASE)


def mask_sensitive(message: str) -> str:
    return _SENSITIVE_KV.sub(lambda m: f"{m.group(1)}=***", message)


class KeyValueFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        base = {
            "level": record.levelname,
            "logger": record.name,
            "message": mask_sensitive(record.getMessage()),
        }
        if record.exc_info:
            base["exc_info"] = self.formatException(record.exc_info)
        ts = self.formatTime(record, self.datefmt)
        kv = [f"time={ts}"] + [f"{k}={v}" for k, v in base.items()]
        return " ".join(kv)


def configure_logging() -> None:
    level = os.getenv("LOG_LEVEL", "INFO").upper()
    logging.basicConfig(level=level, format="%(message)s")
    root = logging.getLogger()
    for h in root.handlers:
        h.setFormatter(KeyValueFormatter())
