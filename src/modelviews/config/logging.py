"""Route ``modelviews.*`` log records through structlog for the CLI.

Library modules only create stdlib loggers (``logging.getLogger(__name__)``)
and never configure output. The CLI calls :func:`configure_logging` once per
invocation; records then reach stderr either as console lines or, with
``--log-json``, as one JSON object per line. Stdout is left to results and
generated source.
"""

from __future__ import annotations

import logging
import sys

import structlog

LOGGER_NAME = "modelviews"


class _CliHandler(logging.StreamHandler):
    """Stderr handler installed by :func:`configure_logging`.

    A distinct type so a later call can find and replace it.
    """


def _pre_chain() -> list[structlog.types.Processor]:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def configure_logging(*, verbose: bool = False, log_json: bool = False) -> None:
    """Install the stderr handler and set the package log level.

    Args:
        verbose: Let DEBUG records from ``modelviews.*`` through; otherwise
            only WARNING and above.
        log_json: Render JSON lines instead of console lines.
    """
    pre_chain = _pre_chain()
    renderer: structlog.types.Processor = (
        structlog.processors.JSONRenderer()
        if log_json
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    # structlog loggers (if any) share the stdlib pipeline below.
    structlog.configure(
        processors=[*pre_chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handler = _CliHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=pre_chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _CliHandler)]:
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(logging.WARNING)

    logging.getLogger(LOGGER_NAME).setLevel(logging.DEBUG if verbose else logging.WARNING)
