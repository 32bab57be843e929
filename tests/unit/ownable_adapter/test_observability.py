"""Structured logging and deployment correlation tests."""

from __future__ import annotations

import io
import json
import logging

import pytest
import structlog

from ownable_adapter.observability import (
    configure_logging,
    deployment_context,
    deployment_id_ctx,
    get_logger,
)
from ownable_adapter.protocols import EventLog, Receipt
from ownable_adapter.provisioning import ADAPTER_DEPLOYED_EVENT, find_event


@pytest.fixture
def json_logs():
    """Route rendered JSON lines from the root logger into a buffer."""
    configure_logging(level='DEBUG', json_output=True, force=True)
    buf = io.StringIO()
    handler = logging.StreamHandler(buf)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            processors=[
                structlog.stdlib.ProcessorFormatter.remove_processors_meta,
                structlog.processors.JSONRenderer(),
            ],
        )
    )
    root = logging.getLogger()
    root.addHandler(handler)
    yield buf
    root.removeHandler(handler)
    structlog.reset_defaults()
    root.handlers.clear()


def _lines(buf: io.StringIO) -> list[dict]:
    lines = [json.loads(line) for line in buf.getvalue().splitlines() if line.startswith('{')]
    return [line for line in lines if str(line.get('logger', '')).startswith('ownable_adapter')]


class TestDeploymentContext:
    def test_sets_and_resets_id(self):
        assert deployment_id_ctx.get() is None
        with deployment_context('dep-1') as did:
            assert did == 'dep-1'
            assert deployment_id_ctx.get() == 'dep-1'
        assert deployment_id_ctx.get() is None

    def test_generates_id_when_missing(self):
        with deployment_context() as did:
            assert did
            assert deployment_id_ctx.get() == did

    def test_nested_context_reuses_outer_id(self):
        with deployment_context('outer'):
            with deployment_context() as inner:
                assert inner == 'outer'
            assert deployment_id_ctx.get() == 'outer'


class TestJsonLogging:
    def test_events_carry_deployment_id(self, json_logs):
        logger = get_logger('ownable_adapter.test')
        with deployment_context('dep-42'):
            logger.info('adapter_deployed', adapter='0xabc')

        lines = _lines(json_logs)
        assert lines[-1]['event'] == 'adapter_deployed'
        assert lines[-1]['deployment_id'] == 'dep-42'
        assert lines[-1]['adapter'] == '0xabc'
        assert lines[-1]['level'] == 'info'

    def test_duplicate_events_warning(self, json_logs):
        log = EventLog(
            name=ADAPTER_DEPLOYED_EVENT,
            args={'adapterAddress': '0x' + 'a' * 40, 'ownableTargetAddress': '0x' + 'c' * 40},
        )
        receipt = Receipt(tx_hash='0x' + '1' * 64, sender='0x' + '2' * 40,
                          function='mint', logs=(log, log))

        assert find_event(receipt, ADAPTER_DEPLOYED_EVENT) is log

        warning = next(
            line for line in _lines(json_logs) if line['event'] == 'duplicate_events_in_receipt'
        )
        assert warning['event_name'] == ADAPTER_DEPLOYED_EVENT
        assert warning['count'] == 2
        assert warning['level'] == 'warning'

    @pytest.mark.asyncio
    async def test_orchestration_logs_share_one_id(self, json_logs, provisioner, deployer):
        await provisioner.deploy_ownable_to_adapter(deployer)

        lines = _lines(json_logs)
        events = {line['event'] for line in lines}
        assert {'target_deployed', 'adapter_deployed', 'ownership_transferred'} <= events
        ids = {line.get('deployment_id') for line in lines}
        assert len(ids) == 1
        assert None not in ids
