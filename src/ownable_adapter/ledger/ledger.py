"""In-memory ledger implementing :class:`TransactionExecutor`.

Used for tests and local runs. Transactions are atomic: a revert anywhere
in the call tree restores every contract to its pre-transaction state.
Accounts and contract addresses are derived deterministically so runs are
reproducible.
"""

from __future__ import annotations

import copy
import hashlib
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable

from ..addresses import derive_address, is_address
from ..errors import SubmissionError, TransactionRevertedError
from ..observability import get_logger
from ..protocols import EventLog, Receipt
from .contracts import DEFAULT_CONTRACTS, Contract, Revert

logger = get_logger(__name__)

DEFAULT_ACCOUNT_COUNT = 10


@dataclass(slots=True)
class _Transaction:
    sender: str
    logs: list[EventLog] = field(default_factory=list)


@dataclass(slots=True)
class CallContext:
    """What a contract sees while executing one call frame."""

    ledger: InMemoryLedger
    tx: _Transaction
    sender: str
    address: str
    static: bool = False

    def emit(self, name: str, **args: Any) -> None:
        if self.static:
            return
        self.tx.logs.append(
            EventLog(name=name, args=MappingProxyType(args), address=self.address)
        )

    def call(self, address: str, function: str, *args: Any) -> Any:
        """Call another contract with this contract as the sender."""
        return self.ledger._dispatch(
            self.tx,
            sender=self.address,
            address=address,
            function=function,
            args=args,
            static=self.static,
        )

    def create(self, contract_name: str, *args: Any) -> str:
        """Deploy a contract with this contract as the creator."""
        if self.static:
            raise Revert('create in static call')
        return self.ledger._create(self.tx, creator=self.address,
                                   contract_name=contract_name, args=args)


class InMemoryLedger:
    """Deterministic single-process ledger.

    ``reject_functions`` names functions whose submissions are rejected
    before execution, for failure-path tests. ``transactions`` records every
    confirmed receipt in order.
    """

    def __init__(
        self,
        *,
        accounts: int = DEFAULT_ACCOUNT_COUNT,
        contracts: Iterable[type[Contract]] = DEFAULT_CONTRACTS,
        reject_functions: Iterable[str] = (),
    ) -> None:
        self.accounts: tuple[str, ...] = tuple(
            derive_address('account', i) for i in range(accounts)
        )
        self.reject_functions: set[str] = set(reject_functions)
        self.transactions: list[Receipt] = []
        self._classes: dict[str, type[Contract]] = {c.contract_name: c for c in contracts}
        self._contracts: dict[str, Contract] = {}
        self._nonces: dict[str, int] = {}
        self._block = 0

    @property
    def default_account(self) -> str:
        return self.accounts[0]

    def has_code(self, address: str) -> bool:
        return address.lower() in self._contracts

    def contract_name_at(self, address: str) -> str | None:
        contract = self._contracts.get(address.lower())
        return contract.contract_name if contract is not None else None

    # ── TransactionExecutor ─────────────────────────────────────────

    async def create(
        self, contract_name: str, args: tuple[Any, ...], sender: str | None,
    ) -> Receipt:
        sender = self._resolve_sender(sender)
        if contract_name not in self._classes:
            raise SubmissionError(f'no bytecode for contract {contract_name!r}')
        return self._execute(
            sender,
            f'{contract_name}.constructor',
            lambda tx: self._create(tx, creator=sender, contract_name=contract_name,
                                    args=_canonical_args(args)),
            creates=True,
        )

    async def submit(
        self,
        contract_address: str,
        function: str,
        args: tuple[Any, ...],
        sender: str | None,
    ) -> Receipt:
        sender = self._resolve_sender(sender)
        address = contract_address.lower()
        if function in self.reject_functions:
            raise SubmissionError(f'{function} rejected by executor')
        return self._execute(
            sender,
            function,
            lambda tx: self._dispatch(tx, sender=sender, address=address,
                                      function=function, args=_canonical_args(args)),
        )

    async def call(
        self, contract_address: str, function: str, args: tuple[Any, ...],
    ) -> Any:
        """Read-only call; state is never modified."""
        tx = _Transaction(sender=self.default_account)
        try:
            return self._dispatch(
                tx,
                sender=self.default_account,
                address=contract_address.lower(),
                function=function,
                args=_canonical_args(args),
                static=True,
            )
        except Revert as exc:
            raise TransactionRevertedError(function, exc.reason) from exc

    # ── Internals ───────────────────────────────────────────────────

    def _resolve_sender(self, sender: str | None) -> str:
        if sender is None:
            return self.default_account
        if not is_address(sender):
            raise SubmissionError(f'invalid sender: {sender!r}')
        return sender.lower()

    def _execute(
        self,
        sender: str,
        function: str,
        body: Callable[[_Transaction], Any],
        *,
        creates: bool = False,
    ) -> Receipt:
        snapshot = copy.deepcopy((self._contracts, self._nonces))
        tx = _Transaction(sender=sender)
        nonce = self._nonces.get(sender, 0)
        try:
            result = body(tx)
        except Revert as exc:
            self._contracts, self._nonces = snapshot
            logger.debug('transaction_reverted', function=function,
                         sender=sender, reason=exc.reason)
            raise TransactionRevertedError(function, exc.reason) from exc

        if not creates:
            self._nonces[sender] = nonce + 1
        self._block += 1
        receipt = Receipt(
            tx_hash=_tx_hash(sender, nonce, self._block),
            sender=sender,
            function=function,
            logs=tuple(tx.logs),
            contract_address=result if creates else None,
            block_number=self._block,
        )
        self.transactions.append(receipt)
        return receipt

    def _create(
        self,
        tx: _Transaction,
        *,
        creator: str,
        contract_name: str,
        args: tuple[Any, ...],
    ) -> str:
        cls = self._classes.get(contract_name)
        if cls is None:
            raise Revert(f'no bytecode for contract {contract_name!r}')
        nonce = self._nonces.get(creator, 0)
        self._nonces[creator] = nonce + 1
        address = derive_address('create', creator, nonce)
        ctx = CallContext(ledger=self, tx=tx, sender=creator, address=address)
        try:
            self._contracts[address] = cls(ctx, *args)
        except TypeError as exc:
            raise Revert(f'{contract_name}: bad constructor arguments ({exc})') from exc
        return address

    def _dispatch(
        self,
        tx: _Transaction,
        *,
        sender: str,
        address: str,
        function: str,
        args: tuple[Any, ...],
        static: bool = False,
    ) -> Any:
        contract = self._contracts.get(address)
        if contract is None:
            raise Revert(f'no contract code at {address}')
        if static and function not in contract.views:
            raise Revert(f'{function} is not a view function')
        ctx = CallContext(ledger=self, tx=tx, sender=sender, address=address,
                          static=static)
        return contract.dispatch(ctx, function, args)


def _canonical_args(args: tuple[Any, ...]) -> tuple[Any, ...]:
    return tuple(a.strip().lower() if is_address(a) else a for a in args)


def _tx_hash(sender: str, nonce: int, block: int) -> str:
    seed = f'tx:{sender}:{nonce}:{block}'.encode()
    return '0x' + hashlib.sha256(seed).hexdigest()
