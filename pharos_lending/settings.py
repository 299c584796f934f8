import os
from dataclasses import dataclass
from typing import Tuple

from web3 import Web3
from eth_utils import is_hex_address


@dataclass(frozen=True)
class TokenConfig:
    symbol: str
    address: str
    decimals: int
    mint_amount: str
    borrow_amount: str
    repay_amount: str


@dataclass(frozen=True)
class LendingSettings:
    rpc_url: str
    chain_id: int | None
    router: str
    mint_router: str
    tokens: Tuple[TokenConfig, ...]
    borrow_selector: str
    repay_selector: str
    interest_rate_mode: int = 2
    referral_code: int = 0
    gas_price_gwei: int = 5
    supply_range: Tuple[float, float] = (50, 80)
    withdraw_divisor: int = 10
    private_keys_file: str = "private_keys.txt"
    delay_between_wallets: Tuple[int, int] = (0, 0)

    def __post_init__(self):
        if not self.tokens:
            raise ValueError("Token list is empty")
        symbols = [t.symbol for t in self.tokens]
        if len(set(symbols)) != len(symbols):
            raise ValueError(f"Duplicate token symbols: {symbols}")
        for t in self.tokens:
            if t.decimals < 0:
                raise ValueError(f"[{t.symbol}] decimals must be >= 0")
        low, high = self.supply_range
        if low >= high:
            raise ValueError(f"Invalid supply range: {self.supply_range}")
        if self.withdraw_divisor <= 0:
            raise ValueError("withdraw_divisor must be positive")
        low, high = self.delay_between_wallets
        if low < 0 or low > high:
            raise ValueError(f"Invalid delay between wallets: {self.delay_between_wallets}")


def checksum(address: str) -> str:
    if not is_hex_address(address):
        raise ValueError(f"Invalid address: {address!r}")
    return Web3.to_checksum_address(address)


def build_tokens(table: dict) -> Tuple[TokenConfig, ...]:
    tokens = []
    for symbol, (address, decimals, mint, borrow, repay) in table.items():
        tokens.append(TokenConfig(symbol, checksum(address), int(decimals), mint, borrow, repay))
    return tuple(tokens)


def load_settings(cfg) -> LendingSettings:
    """
    Збирає незмінні налаштування з модуля config (або будь-якого об'єкта з тими ж атрибутами).
    Відносний шлях до файлу ключів рахується від теки, де лежить config.py.
    """
    keys_file = cfg.PRIVATE_KEYS_FILE
    cfg_file = getattr(cfg, "__file__", None)
    if cfg_file and not os.path.isabs(keys_file):
        keys_file = os.path.join(os.path.dirname(os.path.abspath(cfg_file)), keys_file)

    return LendingSettings(
        rpc_url=cfg.RPC,
        chain_id=getattr(cfg, "CHAIN_ID", None),
        router=checksum(cfg.ROUTER),
        mint_router=checksum(cfg.MINT_ROUTER),
        tokens=build_tokens(cfg.TOKENS),
        borrow_selector=cfg.BORROW_SELECTOR,
        repay_selector=cfg.REPAY_SELECTOR,
        interest_rate_mode=cfg.INTEREST_RATE_MODE,
        referral_code=getattr(cfg, "REFERRAL_CODE", 0),
        gas_price_gwei=cfg.GAS_PRICE_GWEI,
        supply_range=tuple(cfg.SUPPLY_RANGE),
        withdraw_divisor=cfg.WITHDRAW_DIVISOR,
        private_keys_file=keys_file,
        delay_between_wallets=tuple(getattr(cfg, "DELAY_BETWEEN_WALLETS", (0, 0))),
    )
