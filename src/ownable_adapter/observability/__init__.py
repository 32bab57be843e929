"""Observability infrastructure for the adapter provisioner.

Quick start::

    from ownable_adapter.observability import configure_logging, get_logger

    configure_logging(level='DEBUG', json_output=False)
"""

from .logging import (
    configure_logging,
    deployment_context,
    deployment_id_ctx,
    get_logger,
)

__all__ = [
    'configure_logging',
    'deployment_context',
    'deployment_id_ctx',
    'get_logger',
]
