"""Python models of the contracts the provisioner deploys.

Each model keeps only storage. Every external function receives a
:class:`CallContext` describing the caller, so the ledger can snapshot and
roll back contract state by copying the models.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, ClassVar

from ..addresses import ZERO_ADDRESS, same_address

if TYPE_CHECKING:
    from .ledger import CallContext

ROLE_ACCESS_MANAGER = 1 << 255
ROLE_ACCESS_ROLES_MANAGER = 1 << 254
FULL_PRIVILEGES_MASK = (1 << 256) - 1

ADAPTER_DEPLOYED_EVENT = 'NewOwnableToAccessControlAdapterDeployed'


class Revert(Exception):
    """Raised inside contract code to abort the current transaction."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


def external(name: str, *, view: bool = False) -> Callable:
    """Expose a method under its ABI function name."""

    def wrap(fn: Callable) -> Callable:
        fn.__abi_name__ = name
        fn.__abi_view__ = view
        return fn

    return wrap


def require(condition: bool, reason: str) -> None:
    if not condition:
        raise Revert(reason)


class Contract:
    """Base class for contract models."""

    contract_name: ClassVar[str] = ''
    abi: ClassVar[dict[str, str]] = {}
    views: ClassVar[frozenset[str]] = frozenset()

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        abi: dict[str, str] = {}
        views: set[str] = set()
        for klass in reversed(cls.__mro__):
            for attr, value in vars(klass).items():
                name = getattr(value, '__abi_name__', None)
                if name is None:
                    continue
                abi[name] = attr
                if value.__abi_view__:
                    views.add(name)
        cls.abi = abi
        cls.views = frozenset(views)

    def dispatch(self, ctx: CallContext, function: str, args: tuple[Any, ...]) -> Any:
        attr = self.abi.get(function)
        if attr is None:
            raise Revert(f'{self.contract_name}: unknown function {function!r}')
        try:
            return getattr(self, attr)(ctx, *args)
        except TypeError as exc:
            raise Revert(f'{self.contract_name}.{function}: bad arguments ({exc})') from exc


# ── Ownable ───────────────────────────────────────────────────────────


class Ownable(Contract):
    """Single-owner access model."""

    contract_name = 'Ownable'

    def _init_owner(self, ctx: CallContext, owner: str) -> None:
        self._owner = owner
        ctx.emit('OwnershipTransferred', previousOwner=ZERO_ADDRESS, newOwner=owner)

    def _only_owner(self, ctx: CallContext) -> None:
        require(same_address(ctx.sender, self._owner), 'Ownable: caller is not the owner')

    @external('owner', view=True)
    def owner(self, ctx: CallContext) -> str:
        return self._owner

    @external('transferOwnership')
    def transfer_ownership(self, ctx: CallContext, new_owner: str) -> None:
        self._only_owner(ctx)
        require(new_owner != ZERO_ADDRESS, 'Ownable: new owner is the zero address')
        previous, self._owner = self._owner, new_owner
        ctx.emit('OwnershipTransferred', previousOwner=previous, newOwner=new_owner)


class TetherToken(Ownable):
    """Tether-style token; ``transfer`` returns nothing on success."""

    contract_name = 'TetherToken'

    def __init__(
        self,
        ctx: CallContext,
        initial_supply: int,
        name: str,
        symbol: str,
        decimals: int,
    ) -> None:
        require(initial_supply >= 0, 'initial supply must be non-negative')
        self._init_owner(ctx, ctx.sender)
        self._name = name
        self._symbol = symbol
        self._decimals = decimals
        self._total_supply = initial_supply
        self._balances: dict[str, int] = {ctx.sender: initial_supply}

    @external('name', view=True)
    def name(self, ctx: CallContext) -> str:
        return self._name

    @external('symbol', view=True)
    def symbol(self, ctx: CallContext) -> str:
        return self._symbol

    @external('decimals', view=True)
    def decimals(self, ctx: CallContext) -> int:
        return self._decimals

    @external('totalSupply', view=True)
    def total_supply(self, ctx: CallContext) -> int:
        return self._total_supply

    @external('balanceOf', view=True)
    def balance_of(self, ctx: CallContext, holder: str) -> int:
        return self._balances.get(holder, 0)

    @external('transfer')
    def transfer(self, ctx: CallContext, to: str, value: int) -> None:
        require(value >= 0, 'negative value')
        balance = self._balances.get(ctx.sender, 0)
        require(balance >= value, 'insufficient balance')
        self._balances[ctx.sender] = balance - value
        self._balances[to] = self._balances.get(to, 0) + value
        ctx.emit('Transfer', **{'from': ctx.sender, 'to': to, 'value': value})

    @external('issue')
    def issue(self, ctx: CallContext, amount: int) -> None:
        self._only_owner(ctx)
        require(amount > 0, 'amount must be positive')
        self._total_supply += amount
        self._balances[self._owner] = self._balances.get(self._owner, 0) + amount
        ctx.emit('Issue', amount=amount)


# ── Role-based access control ─────────────────────────────────────────


class AccessControl(Contract):
    """Bitmask role model: ``userRoles[address]`` holds granted permissions."""

    contract_name = 'AccessControl'

    def _init_roles(self, ctx: CallContext, owner: str, features: int = 0) -> None:
        self._user_roles: dict[str, int] = {}
        self._user_roles[ctx.address] = features
        self._user_roles[owner] = FULL_PRIVILEGES_MASK
        ctx.emit('RoleUpdated', by=ctx.sender, to=owner,
                 requested=FULL_PRIVILEGES_MASK, assigned=FULL_PRIVILEGES_MASK)

    def _is_in_role(self, operator: str, required: int) -> bool:
        return self._user_roles.get(operator, 0) & required == required

    @external('userRoles', view=True)
    def user_roles(self, ctx: CallContext, operator: str) -> int:
        return self._user_roles.get(operator, 0)

    @external('features', view=True)
    def features(self, ctx: CallContext) -> int:
        return self._user_roles.get(ctx.address, 0)

    @external('isSenderInRole', view=True)
    def is_sender_in_role(self, ctx: CallContext, required: int) -> bool:
        return self._is_in_role(ctx.sender, required)

    @external('isOperatorInRole', view=True)
    def is_operator_in_role(self, ctx: CallContext, operator: str, required: int) -> bool:
        return self._is_in_role(operator, required)

    @external('updateRole')
    def update_role(self, ctx: CallContext, operator: str, role: int) -> None:
        require(self._is_in_role(ctx.sender, ROLE_ACCESS_MANAGER), 'access denied')
        assigned = self._evaluate_by(ctx.sender, self._user_roles.get(operator, 0), role)
        self._user_roles[operator] = assigned
        ctx.emit('RoleUpdated', by=ctx.sender, to=operator, requested=role, assigned=assigned)

    @external('updateFeatures')
    def update_features(self, ctx: CallContext, mask: int) -> None:
        self.update_role(ctx, ctx.address, mask)

    def _evaluate_by(self, operator: str, target: int, desired: int) -> int:
        # An operator can only grant or revoke permissions it holds itself.
        privileges = self._user_roles.get(operator, 0)
        target |= privileges & desired
        target &= FULL_PRIVILEGES_MASK ^ (privileges & (FULL_PRIVILEGES_MASK ^ desired))
        return target


class AccessControlMock(AccessControl):
    contract_name = 'AccessControlMock'

    def __init__(self, ctx: CallContext, owner: str, features: int = 0) -> None:
        self._init_roles(ctx, owner, features)


class OwnableToAccessControlAdapter(AccessControl):
    """Re-exposes an Ownable target's functions behind access roles.

    The adapter is only functional once it owns the target; before that
    every forwarded ``onlyOwner`` call is rejected by the target itself.
    """

    contract_name = 'OwnableToAccessControlAdapter'

    def __init__(self, ctx: CallContext, target: str, owner: str) -> None:
        require(target != ZERO_ADDRESS, 'zero address')
        require(owner != ZERO_ADDRESS, 'zero address')
        self._init_roles(ctx, owner)
        self._target = target
        self._access_roles: dict[str, int] = {}

    @external('target', view=True)
    def target(self, ctx: CallContext) -> str:
        return self._target

    @external('accessRoles', view=True)
    def access_roles(self, ctx: CallContext, function: str) -> int:
        return self._access_roles.get(function, 0)

    @external('updateAccessRole')
    def update_access_role(self, ctx: CallContext, function: str, role: int) -> None:
        require(self._is_in_role(ctx.sender, ROLE_ACCESS_ROLES_MANAGER), 'access denied')
        self._access_roles[function] = role
        ctx.emit('AccessRoleUpdated', selector=function, role=role)

    @external('execute')
    def execute(self, ctx: CallContext, function: str, *args: Any) -> Any:
        role = self._access_roles.get(function, 0)
        require(role != 0, 'access role not set')
        require(self._is_in_role(ctx.sender, role), 'access denied')
        result = ctx.call(self._target, function, *args)
        ctx.emit('ExecutionComplete', selector=function, args=tuple(args), result=result)
        return result


class AdapterFactory(Contract):
    """Mints adapters for targets owned by the caller."""

    contract_name = 'AdapterFactory'

    def __init__(self, ctx: CallContext) -> None:
        self._deployed: list[str] = []

    @external('deployedAdapters', view=True)
    def deployed_adapters(self, ctx: CallContext) -> tuple[str, ...]:
        return tuple(self._deployed)

    @external('deployNewOwnableToAccessControlAdapter')
    def deploy_new_adapter(self, ctx: CallContext, target: str) -> str:
        owner = ctx.call(target, 'owner')
        require(same_address(owner, ctx.sender), 'not an owner')
        adapter = ctx.create(OwnableToAccessControlAdapter.contract_name, target, ctx.sender)
        self._deployed.append(adapter)
        ctx.emit(ADAPTER_DEPLOYED_EVENT, adapterAddress=adapter, ownableTargetAddress=target)
        return adapter


DEFAULT_CONTRACTS: tuple[type[Contract], ...] = (
    TetherToken,
    AccessControlMock,
    OwnableToAccessControlAdapter,
    AdapterFactory,
)
