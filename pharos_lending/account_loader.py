from dataclasses import dataclass
from typing import List

from eth_account import Account
from eth_account.signers.local import LocalAccount


@dataclass(frozen=True)
class WalletContext:
    private_key: str
    address: str

    @classmethod
    def from_key(cls, private_key: str) -> "WalletContext":
        return cls(private_key, Account.from_key(private_key).address)

    @property
    def account(self) -> LocalAccount:
        return Account.from_key(self.private_key)

    @property
    def short(self) -> str:
        return self.address[-8:]


def load_private_keys(path: str) -> List[str]:
    with open(path, "r") as f:
        return [line.strip() for line in f if line.strip()]


def load_wallets(path: str) -> List[WalletContext]:
    return [WalletContext.from_key(pk) for pk in load_private_keys(path)]
