"""structlog configuration for taskboard.

All log output goes to stderr so ``--json`` results on stdout stay
parseable. stdlib loggers (``logging.getLogger(__name__)`` in the
domain and infrastructure layers) and structlog loggers share one
processor chain, so both render the same way.

Two renderers:
- console (default): key=value lines, colored when stderr is a TTY
- JSON (``--log-json``): one object per line

Records carry the thread name, which tells position writes from the
arrange worker pool apart from the main thread.
"""

from __future__ import annotations

import logging
import sys

import structlog

_HANDLER_NAME = "taskboard-stderr"

# Libraries that are chatty at INFO/DEBUG and never useful to board users.
_QUIET_LOGGERS = ("sqlalchemy", "concurrent.futures")


def _shared_processors() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            {structlog.processors.CallsiteParameter.THREAD_NAME}
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def _renderer(log_json: bool) -> structlog.types.Processor:
    if log_json:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Route structlog and stdlib logging to stderr.

    Args:
        verbose: Show taskboard DEBUG records (arrange state changes,
            telemetry spans). Otherwise only WARNING and above.
        log_json: Render JSON lines instead of console lines.

    Safe to call more than once: the handler installed by a previous
    call is replaced, other root handlers are left alone.
    """
    shared = _shared_processors()
    structlog.configure(
        processors=[*shared, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.set_name(_HANDLER_NAME)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=shared,
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                _renderer(log_json),
            ],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if h.get_name() == _HANDLER_NAME]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger("taskboard").setLevel(logging.DEBUG if verbose else logging.WARNING)
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
