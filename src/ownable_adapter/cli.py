"""Rehearse a provisioning run against the in-memory ledger.

Runs the direct or factory flow end to end on a fresh in-memory ledger and
prints a JSON summary of what was deployed and who owns the target.
Settings come from ``ADAPTER_PROVISIONER_*`` environment variables.

    ownable-adapter-rehearse --factory --log-format console
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from .errors import ProvisioningError
from .ledger import InMemoryArtifactRegistry, InMemoryLedger
from .observability import configure_logging, get_logger
from .provisioning import (
    AdapterProvisioner,
    DeploymentRequest,
    FactoryAdapterDeployment,
)
from .settings import ProvisionerSettings

logger = get_logger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument('--factory', action='store_true', help='mint the adapter through a factory')
    parser.add_argument('--existing-target', action='store_true',
                        help='deploy the target first and pass it by address')
    parser.add_argument('--log-level', default=None, help='override the configured log level')
    parser.add_argument('--log-format', choices=('json', 'console'), default=None)
    return parser


async def rehearse(
    settings: ProvisionerSettings,
    *,
    use_factory: bool,
    existing_target: bool,
) -> dict[str, Any]:
    ledger = InMemoryLedger()
    provisioner = AdapterProvisioner(
        registry=InMemoryArtifactRegistry(ledger), settings=settings,
    )
    deployer = ledger.default_account

    target: str | None = None
    if existing_target:
        target = (await provisioner.deploy_default_target(deployer)).address

    request = DeploymentRequest(deployer=deployer, target=target, use_factory=use_factory)
    result = await provisioner.provision(request)

    summary: dict[str, Any] = {
        'deployer': deployer,
        'target': result.target.address,
        'adapter': result.adapter.address,
        'target_owner': await result.target.call('owner'),
        'binding_state': result.binding.state,
        'transactions': len(ledger.transactions),
    }
    if isinstance(result, FactoryAdapterDeployment):
        summary['factory'] = result.factory.address
        summary['mint_tx_hash'] = result.receipt.tx_hash
    return summary


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        settings = ProvisionerSettings.from_env()
    except ValueError as exc:
        print(f'config error: {exc}', file=sys.stderr)
        return 2
    errors = settings.validate()
    if errors:
        for error in errors:
            print(f'config error: {error}', file=sys.stderr)
        return 2

    configure_logging(
        level=args.log_level or settings.log_level,
        json_output=(args.log_format or ('json' if settings.log_json else 'console')) == 'json',
    )
    try:
        summary = asyncio.run(
            rehearse(settings, use_factory=args.factory, existing_target=args.existing_target)
        )
    except ProvisioningError as exc:
        logger.error('rehearsal_failed', **exc.payload())
        return 1

    print(json.dumps(summary, indent=2, sort_keys=True))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
