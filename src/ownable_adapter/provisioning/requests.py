"""Validated deployment requests built from raw string input."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, field_validator

from ..addresses import is_address


class DeploymentRequest(BaseModel):
    """Deployer plus optional factory/target addresses.

    Empty strings are treated as "not given" so CLI and env input can be
    passed straight through.
    """

    model_config = ConfigDict(frozen=True)

    deployer: str
    factory: str | None = None
    target: str | None = None
    use_factory: bool = False
    """Mint through a factory even when no factory address is given."""

    @field_validator('deployer')
    @classmethod
    def _deployer_address(cls, value: str) -> str:
        value = value.strip()
        if not is_address(value):
            raise ValueError('deployer must be an address')
        return value.lower()

    @field_validator('factory', 'target', mode='before')
    @classmethod
    def _optional_address(cls, value: str | None) -> str | None:
        if value is None:
            return None
        value = str(value).strip()
        if not value:
            return None
        if not is_address(value):
            raise ValueError('must be an address')
        return value.lower()
