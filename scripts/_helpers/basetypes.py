from dataclasses import dataclass, field
from typing import Any

from eth_account import Account

from rentable_nfts import ZERO_ADDRESS, ManualClock, RentableNFTs, to_address


@dataclass
class ScenarioContext:
    ledger: RentableNFTs
    clock: ManualClock
    accounts: dict[str, str] = field(default_factory=dict)

    @classmethod
    def create(cls, ledger: RentableNFTs, clock: ManualClock, aliases: list[str]) -> "ScenarioContext":
        return cls(ledger, clock, {alias: Account.create().address for alias in aliases})

    def __getitem__(self, key: str) -> str:
        if key in self.accounts:
            return self.accounts[key]
        if key == "zero":
            return ZERO_ADDRESS
        return to_address(key)

    def __contains__(self, key):
        return key in self.accounts

    def alias(self, address: str) -> str:
        return next((k for k, v in self.accounts.items() if v == address), address)

    def timestamp(self, value: Any) -> int:
        # "+3600" / "-3600" are relative to the clock, anything else is absolute
        if isinstance(value, str) and value[:1] in "+-":
            return self.clock.now() + int(value)
        return int(value)


@dataclass
class Step:
    op: str
    args: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, values: dict) -> "Step":
        values = dict(values)
        return cls(values.pop("op"), values)

    def __str__(self):
        args = ", ".join(f"{k}={v}" for k, v in self.args.items())
        return f"{self.op}({args})"
