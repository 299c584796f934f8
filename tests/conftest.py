import dataclasses
import types

import pytest
from web3 import Web3

import config
from pharos_lending.account_loader import WalletContext
from pharos_lending.chain import TransactionReverted
from pharos_lending.settings import load_settings

# Hardhat / anvil dev keys
KEY_0 = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
ADDR_0 = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
KEY_1 = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
ADDR_1 = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"

BORROW_SELECTOR = bytes.fromhex(config.BORROW_SELECTOR)
REPAY_SELECTOR = bytes.fromhex(config.REPAY_SELECTOR)


class FakeChainClient:
    """
    Записує всі виклики замість мережі.
    fail   — {(method, token)}: відправка падає одразу
    revert — {(method, token)}: відправка ок, receipt зі status 0
    """

    def __init__(self, default_allowance=0):
        self.default_allowance = default_allowance
        self.allowances = {}
        self.allowance_errors = set()
        self.fail = set()
        self.revert = set()
        self.calls = []
        self.sent = {}
        self.waited = []

    def allowance(self, token, owner, spender):
        self.calls.append(("allowance", token, None, {"owner": owner, "spender": spender}))
        if token in self.allowance_errors:
            raise ConnectionError("allowance call failed")
        return self.allowances.get(token, self.default_allowance)

    def _tx(self, method, wallet, token, amount, **extra):
        extra["wallet"] = wallet.address
        self.calls.append((method, token, amount, extra))
        if (method, token) in self.fail:
            raise ValueError({"code": -32000, "message": f"{method} rejected"})
        tx_hash = "0x%064x" % len(self.calls)
        self.sent[tx_hash] = (method, token)
        return tx_hash

    def mint(self, wallet, token, amount):
        return self._tx("mint", wallet, token, amount)

    def approve(self, wallet, token, spender, amount):
        return self._tx("approve", wallet, token, amount, spender=spender)

    def supply(self, wallet, pool, asset, amount, on_behalf_of, referral_code=0):
        return self._tx("supply", wallet, asset, amount, pool=pool, on_behalf_of=on_behalf_of, referral_code=referral_code)

    def withdraw(self, wallet, pool, asset, amount, to):
        return self._tx("withdraw", wallet, asset, amount, pool=pool, to=to)

    def send_raw(self, wallet, to, data):
        method = {BORROW_SELECTOR: "borrow", REPAY_SELECTOR: "repay"}[data[:4]]
        token = Web3.to_checksum_address(data[16:36])
        amount = int.from_bytes(data[36:68], "big")
        return self._tx(method, wallet, token, amount, to=to, data=data)

    def wait(self, tx_hash):
        self.waited.append(tx_hash)
        if self.sent[tx_hash] in self.revert:
            raise TransactionReverted(tx_hash)
        return {"status": 1, "transactionHash": tx_hash}

    def of(self, method):
        return [c for c in self.calls if c[0] == method]

    def count(self, method):
        return len(self.of(method))


class FixedRandom:
    """random() завжди повертає value — supply = low + value * (high - low)."""

    def __init__(self, value=0.5):
        self.value = value

    def random(self):
        return self.value

    def randint(self, low, high):
        return low


@pytest.fixture
def settings(tmp_path):
    return dataclasses.replace(load_settings(config), private_keys_file=str(tmp_path / "private_keys.txt"))


@pytest.fixture
def fake_client():
    return FakeChainClient()


@pytest.fixture
def wallet():
    return WalletContext.from_key(KEY_0)


@pytest.fixture
def wallets():
    return [WalletContext.from_key(KEY_0), WalletContext.from_key(KEY_1)]


@pytest.fixture
def cfg_with_keys(tmp_path):
    """Копія config з файлом ключів у tmp_path; повертає (cfg, path)."""
    keys_file = tmp_path / "private_keys.txt"
    values = {k: getattr(config, k) for k in dir(config) if k.isupper()}
    values["PRIVATE_KEYS_FILE"] = str(keys_file)
    return types.SimpleNamespace(**values), keys_file


def token_of(settings, symbol):
    return next(t for t in settings.tokens if t.symbol == symbol)
