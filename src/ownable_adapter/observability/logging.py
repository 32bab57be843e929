"""structlog setup for provisioning runs.

Every orchestration call opens a :func:`deployment_context`; the log lines
it produces, including those of nested helper deployments, carry the same
``deployment_id``.

    configure_logging(level='DEBUG', json_output=False)
    with deployment_context():
        get_logger(__name__).info('factory_deployed', factory=address)
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import structlog

deployment_id_ctx: ContextVar[str | None] = ContextVar('deployment_id', default=None)

_configured = False


def _add_deployment_id(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict,
) -> dict:
    did = deployment_id_ctx.get()
    if did is not None:
        event_dict['deployment_id'] = did
    return event_dict


def configure_logging(
    *,
    level: str = 'INFO',
    json_output: bool = True,
    force: bool = False,
) -> None:
    """Route structlog through a single stdout handler on the root logger.

    Only the first call takes effect unless *force* is set. *json_output*
    picks JSON lines over the coloured console renderer.
    """
    global _configured
    if _configured and not force:
        return
    _configured = True

    processors: list = [
        structlog.contextvars.merge_contextvars,
        _add_deployment_id,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.format_exc_info,
    ]
    renderer = (
        structlog.processors.JSONRenderer() if json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[*processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(structlog.stdlib.ProcessorFormatter(
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    ))
    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


@contextmanager
def deployment_context(deployment_id: str | None = None) -> Iterator[str]:
    """Bind a deployment ID until the block exits and yield it.

    Inside an enclosing context the outer ID is kept unless one is passed
    explicitly.
    """
    current = deployment_id_ctx.get()
    if current is not None and deployment_id is None:
        yield current
        return
    did = deployment_id or uuid.uuid4().hex[:12]
    token = deployment_id_ctx.set(did)
    try:
        yield did
    finally:
        deployment_id_ctx.reset(token)
