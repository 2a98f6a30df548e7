"""Structured JSON logging on stdout."""

import logging
import sys

_JSON_FORMAT = (
    '{"timestamp":"%(asctime)s","level":"%(levelname)s",'
    '"logger":"%(name)s","message":"%(message)s"}'
)


def parse_level(name: str) -> int:
    level = logging.getLevelName(name.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def setup_logging(level: str = "info") -> logging.Logger:
    numeric = parse_level(level)
    formatter = logging.Formatter(_JSON_FORMAT)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)

    logger = logging.getLogger("bridge")
    logger.setLevel(numeric)
    logger.handlers = [stream_handler]
    logger.propagate = False

    uvicorn_handler = logging.StreamHandler(sys.stdout)
    uvicorn_handler.setFormatter(formatter)
    logging.getLogger("uvicorn.access").handlers = [uvicorn_handler]
    logging.getLogger("uvicorn.error").handlers = [uvicorn_handler]

    return logger
