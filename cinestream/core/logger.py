import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, List, MutableMapping, Optional

import structlog

ROOT_LOGGER = "cinestream"
PLAIN_FORMAT = "[%(asctime)s] %(levelname)s: %(name)s: %(message)s"

# Request fields lead so access lines read the same in every log file
_LEADING_KEYS = (
    "timestamp",
    "event",
    "service",
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "level",
    "logger",
)


def _order_keys(_logger: Any, _method: str, event: MutableMapping[str, Any]) -> dict:
    head = {key: event.pop(key) for key in _LEADING_KEYS if key in event}
    return {**head, **dict(sorted(event.items()))}


def _handlers(
    name: str,
    log_dir: Optional[str | Path],
    *,
    with_stream: bool,
    stream_level: int | str,
    file_level: int | str,
    max_bytes: int,
    backup_count: int,
) -> List[logging.Handler]:
    handlers: List[logging.Handler] = []
    if with_stream:
        console = logging.StreamHandler()
        console.setLevel(stream_level)
        handlers.append(console)
    if log_dir:
        folder = Path(log_dir)
        folder.mkdir(parents=True, exist_ok=True)
        rotating = RotatingFileHandler(folder / f"{name}.log", maxBytes=max_bytes, backupCount=backup_count)
        rotating.setLevel(file_level)
        handlers.append(rotating)
    return handlers


def _configure_structlog(json_output: bool) -> None:
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            _order_keys,
            structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def setup_logger(
    name: str = ROOT_LOGGER,
    *,
    log_dir: Optional[str | Path] = None,
    logger_level: int | str = logging.INFO,
    stream_level: int | str = logging.INFO,
    add_stream_handler: bool = True,
    propagate: bool = False,
    max_bytes: int = 10 * 1024 * 1024,
    backup_count: int = 5,
    use_structlog: bool = True,
    structlog_json: bool = True,
) -> logging.Logger | structlog.stdlib.BoundLogger:
    """Attach console and rotating-file output to a Cinestream logger.

    Calling it again for the same name replaces the previous handlers, so the
    service can be rebuilt (as the tests do) without doubling every line.

    Args:
        name: Logger name; the file handler writes ``{log_dir}/{name}.log``.
        log_dir: Directory for the rotating log file. Console only when omitted.
        logger_level: Level of the logger and of the file handler.
        stream_level: Level of the console handler.
        add_stream_handler: Set False to silence console output.
        propagate: Forward records to ancestor loggers as well.
        max_bytes: File size that triggers a rotation.
        backup_count: Rotated files kept on disk.
        use_structlog: Return a structlog ``BoundLogger`` instead of the plain stdlib logger.
        structlog_json: JSON lines when True, the coloured dev renderer otherwise.
    """
    target = logging.getLogger(name)
    target.handlers.clear()
    target.setLevel(logger_level)
    target.propagate = propagate

    formatter = logging.Formatter("%(message)s" if use_structlog else PLAIN_FORMAT)
    for handler in _handlers(
        name,
        log_dir,
        with_stream=add_stream_handler,
        stream_level=stream_level,
        file_level=logger_level,
        max_bytes=max_bytes,
        backup_count=backup_count,
    ):
        handler.setFormatter(formatter)
        target.addHandler(handler)

    if not use_structlog:
        return target
    _configure_structlog(structlog_json)
    return structlog.get_logger(name)


def get_logger(name: Optional[str] = ROOT_LOGGER, **kwargs) -> structlog.stdlib.BoundLogger:
    """Return ``cinestream.<name>``; extra kwargs go to :func:`setup_logger`.

    Without kwargs the child has no handlers and its records reach the
    service's ``cinestream`` logger.

    Example:
        .. code-block:: python

            logger = get_logger("password_reset")
            logger.info("reset_requested", user_id=user.id)
    """
    name = name or ROOT_LOGGER
    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"
    if kwargs:
        return setup_logger(name, **kwargs)
    return structlog.get_logger(name)
