# io/logging.py
import json
import logging
import sys
from dataclasses import asdict

from pathkit.runtime.hooks import NoopHooks


class _JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "level": record.levelname,
            "msg": record.getMessage(),
            "logger": record.name,
        }
        extra = getattr(record, "extra", None)
        if isinstance(extra, dict):
            payload.update(extra)
        return json.dumps(payload, default=str)


def default_json_logger(name="pathkit", level="INFO", stream=None):
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler(stream or sys.stdout)
        h.setFormatter(_JsonFormatter())
        logger.addHandler(h)
    logger.setLevel(level)
    return logger


class LoggingHooks(NoopHooks):
    """
    Structured logs for index builds/searches and route computations.
    Searches are per-query and only logged in debug mode, every `sample_every`-th one.
    """

    def __init__(
        self,
        name: str = "pathkit",
        level: str = "INFO",
        debug: bool = False,
        sample_every: int = 1,
        logger: logging.Logger | None = None,
    ):
        self.name, self.debug, self.sample_every = name, debug, max(1, sample_every)
        self.log = logger or default_json_logger(name=name, level=level)
        self._searches = 0

    def _emit(self, level: str, msg: str, **extra):
        self.log.log(getattr(logging, level), msg, extra={"extra": {"toolkit": self.name, **extra}})

    # --------------- point index -----------------------------

    def build_start(self, *, points: int):
        self._emit("INFO", "build_start", points=points)

    def build_end(self, *, points: int, depth: int, ms: float):
        self._emit("INFO", "build_end", points=points, depth=depth, ms=round(ms, 3))

    def search(self, query, *, found, dist: float):
        self._searches += 1
        if self.debug and (self._searches % self.sample_every) == 0:
            self._emit("DEBUG", "search", query=asdict(query), found=asdict(found), dist=dist)

    # --------------- routing -----------------------------

    def route_start(self, *, source: int, target: int, nodes: int):
        if self.debug:
            self._emit("DEBUG", "route_start", source=source, target=target, nodes=nodes)

    def route_end(self, *, source: int, target: int, weight: int, hops: int, ms: float):
        self._emit(
            "INFO", "route_end", source=source, target=target, weight=weight, hops=hops, ms=round(ms, 3)
        )

    def error(self, *, reason: str, **kw):
        self._emit("ERROR", "route_error", reason=reason, **kw)
