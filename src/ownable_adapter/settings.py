"""Provisioner configuration settings.

ProvisionerSettings is the single configuration object accepted by
AdapterProvisioner. It is a plain dataclass (not env-coupled) so tests can
inject config without touching os.environ.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

ENV_PREFIX = 'ADAPTER_PROVISIONER_'
_TRUE_VALUES = frozenset({'1', 'true', 'yes', 'on'})
_LOG_LEVELS = frozenset({'DEBUG', 'INFO', 'WARNING', 'ERROR'})


@dataclass(frozen=True, slots=True)
class ProvisionerSettings:
    """Artifact names, default-target parameters and handshake behaviour."""

    # ── Artifacts ──────────────────────────────────────────────────
    token_artifact: str = 'TetherToken'
    """Artifact deployed as the default Ownable target."""

    ownable_artifact: str = 'contracts/AdapterFactory.sol:Ownable'
    """Interface artifact used to attach an Ownable target by address."""

    adapter_artifact: str = 'OwnableToAccessControlAdapter'
    factory_artifact: str = 'AdapterFactory'
    access_control_artifact: str = 'AccessControlMock'

    # ── Default target token ───────────────────────────────────────
    token_initial_supply: int = 0
    token_name: str = 'Tether USD'
    token_symbol: str = 'USDT'
    token_decimals: int = 6

    # ── Handshake ──────────────────────────────────────────────────
    verify_ownership: bool = True
    """Read ``owner()`` back after the transfer and fail on mismatch."""

    # ── Logging ────────────────────────────────────────────────────
    log_level: str = 'INFO'
    log_json: bool = True

    def validate(self) -> list[str]:
        """Return a list of configuration errors. Empty means valid."""
        errors: list[str] = []
        for label in (
            'token_artifact',
            'ownable_artifact',
            'adapter_artifact',
            'factory_artifact',
            'access_control_artifact',
        ):
            if not getattr(self, label).strip():
                errors.append(f'{label} must not be empty')
        if self.token_initial_supply < 0:
            errors.append('token_initial_supply must be >= 0')
        if not 0 <= self.token_decimals <= 255:
            errors.append('token_decimals must be within 0..255')
        if self.log_level.upper() not in _LOG_LEVELS:
            errors.append(f'log_level must be one of {sorted(_LOG_LEVELS)}')
        return errors

    @classmethod
    def from_env(cls, env: dict[str, str] | None = None) -> ProvisionerSettings:
        """Build settings from ``ADAPTER_PROVISIONER_*`` variables.

        Unset variables keep the dataclass defaults.

        Raises:
            ValueError: If an integer variable does not parse.
        """
        if env is None:
            env = dict(os.environ)

        def get(key: str, default: str) -> str:
            return env.get(ENV_PREFIX + key, default).strip() or default

        def get_int(key: str, default: int) -> int:
            raw = get(key, str(default))
            try:
                return int(raw)
            except ValueError:
                raise ValueError(f'{ENV_PREFIX}{key} must be an integer, got {raw!r}') from None

        defaults = cls()
        return cls(
            token_artifact=get('TOKEN_ARTIFACT', defaults.token_artifact),
            ownable_artifact=get('OWNABLE_ARTIFACT', defaults.ownable_artifact),
            adapter_artifact=get('ADAPTER_ARTIFACT', defaults.adapter_artifact),
            factory_artifact=get('FACTORY_ARTIFACT', defaults.factory_artifact),
            access_control_artifact=get(
                'ACCESS_CONTROL_ARTIFACT', defaults.access_control_artifact,
            ),
            token_initial_supply=get_int('TOKEN_INITIAL_SUPPLY', defaults.token_initial_supply),
            token_name=get('TOKEN_NAME', defaults.token_name),
            token_symbol=get('TOKEN_SYMBOL', defaults.token_symbol),
            token_decimals=get_int('TOKEN_DECIMALS', defaults.token_decimals),
            verify_ownership=get('VERIFY_OWNERSHIP', 'true').lower()
            in _TRUE_VALUES,
            log_level=get('LOG_LEVEL', defaults.log_level).upper(),
            log_json=get('LOG_FORMAT', 'json').lower() == 'json',
        )
