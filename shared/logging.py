"""
Structured logging shared by every component.

Each module grabs a logger bound to its component and module name:

    from shared.logging import get_logger
    log = get_logger("explorer", "orchestrator")
    log.info("orchestrator.stage.started", stage_type="discovering", stage_number=1)

Entry points call configure_logging() once; libraries never do.
"""

import logging
import sys

import structlog


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure structlog on top of the stdlib logging module."""
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, level.upper(), logging.INFO),
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if json_output
        else structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty())
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(component: str, module: str):
    """Return a logger bound to ``component`` and ``module``."""
    return structlog.get_logger(f"{component}.{module}").bind(
        component=component, module=module
    )
