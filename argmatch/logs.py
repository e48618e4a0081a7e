"""
structlog wiring for argmatch diagnostics.

Diagnostics are optional and never drive control flow: the matcher reports
how tokens were classified, where it dispatched into subcommands and why a
level failed validation. Nothing is emitted until the host enables the
'argmatch' logger (directly through logging, or with configure_logging()).

Output modes (configure_logging)
- Human (default): structlog console renderer to stderr
- JSON (log_json=True): structured JSON lines to stderr
"""
import logging
import sys

import structlog

ROOT = "argmatch"

_processors = [
    # Drop disabled events before any rendering work happens.
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_log_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
]


def get_logger(name):
    """
    Return a structlog bound logger proxying to the stdlib logger `name`.

    The logger is wrapped explicitly instead of going through structlog's
    global configuration so that importing argmatch never changes (or depends
    on) how the host application configured structlog.
    """
    return structlog.wrap_logger(
        logging.getLogger(name),
        processors=_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
    )


def configure_logging(*, verbose=False, log_json=False):
    """
    Route argmatch diagnostics to stderr.

    Parameters
    - verbose: enable DEBUG-level output for the 'argmatch' logger. When False,
      only WARNING and above.
    - log_json: use the JSON renderer instead of the console renderer.

    Returns
    - logging.Handler: the installed handler (useful to detach it again).
    """
    shared = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())

    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logger = logging.getLogger(ROOT)
    # Replace a handler installed by a previous call instead of stacking them.
    for previous in [h for h in logger.handlers if getattr(h, "_argmatch", False)]:
        logger.removeHandler(previous)
    handler._argmatch = True
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return handler


__all__ = (
    "configure_logging",
    "get_logger",
)
