"""
In-process stand-ins for the on-chain collaborators the rewarder leans on:
the reward token whitelist and the token ledger that escrows and pays out rewards.
"""
from collections import defaultdict
from dataclasses import dataclass, field
from typing import Iterable, Protocol

import eth_utils as eth

from rewarder.errors import InsufficientBalanceError
from rewarder.models import EthereumAddress


class TokenLedger(Protocol):
    def transfer_in(
        self, token: EthereumAddress, sender: EthereumAddress, amount: int
    ) -> None:
        ...

    def transfer_out(
        self, token: EthereumAddress, recipient: EthereumAddress, amount: int
    ) -> None:
        ...


class TokenWhitelist:
    """Reward tokens incentive providers are allowed to distribute. Mutated by governance."""

    def __init__(self, tokens: Iterable[EthereumAddress] = ()):
        self._tokens: set[EthereumAddress] = {eth.to_checksum_address(t) for t in tokens}

    def __contains__(self, token: EthereumAddress) -> bool:
        return eth.to_checksum_address(token) in self._tokens

    def toggle(self, token: EthereumAddress) -> bool:
        """Flip membership of `token`, returns whether it is now whitelisted"""
        token = eth.to_checksum_address(token)
        if token in self._tokens:
            self._tokens.remove(token)
            return False
        self._tokens.add(token)
        return True

    @property
    def tokens(self) -> list[EthereumAddress]:
        return sorted(self._tokens)


@dataclass
class InMemoryTokenLedger:
    """
    Balances and allowances for any number of tokens, with a single custody account
    holding everything escrowed by the rewarder.
    Transfers are atomic: they either move the full amount or raise without touching balances.
    """

    custody: EthereumAddress
    balances: dict[tuple[str, str], int] = field(default_factory=lambda: defaultdict(int))
    allowances: dict[tuple[str, str], int] = field(
        default_factory=lambda: defaultdict(int)
    )

    def __post_init__(self):
        self.custody = eth.to_checksum_address(self.custody)

    @staticmethod
    def _key(token: str, account: str) -> tuple[str, str]:
        return (eth.to_checksum_address(token), eth.to_checksum_address(account))

    def balance_of(self, token: EthereumAddress, account: EthereumAddress) -> int:
        return self.balances[self._key(token, account)]

    def mint(self, token: EthereumAddress, to: EthereumAddress, amount: int) -> None:
        self.balances[self._key(token, to)] += amount

    def approve(self, token: EthereumAddress, owner: EthereumAddress, amount: int) -> None:
        """`owner` lets the custody account pull up to `amount` of `token`"""
        self.allowances[self._key(token, owner)] = amount

    def _move(self, token: str, sender: str, recipient: str, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"Cannot transfer a negative amount: {amount}")
        sender_key = self._key(token, sender)
        if self.balances[sender_key] < amount:
            raise InsufficientBalanceError(
                f"{sender} holds {self.balances[sender_key]} of {token}, needs {amount}"
            )
        self.balances[sender_key] -= amount
        self.balances[self._key(token, recipient)] += amount

    def transfer_in(
        self, token: EthereumAddress, sender: EthereumAddress, amount: int
    ) -> None:
        allowance_key = self._key(token, sender)
        if self.allowances[allowance_key] < amount:
            raise InsufficientBalanceError(
                f"{sender} approved {self.allowances[allowance_key]} of {token}, needs {amount}"
            )
        self._move(token, sender, self.custody, amount)
        self.allowances[allowance_key] -= amount

    def transfer_out(
        self, token: EthereumAddress, recipient: EthereumAddress, amount: int
    ) -> None:
        self._move(token, self.custody, recipient, amount)
