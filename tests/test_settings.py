import dataclasses
import os

import pytest
from web3 import Web3

import config
from pharos_lending.account_loader import WalletContext, load_private_keys, load_wallets
from pharos_lending.settings import build_tokens, load_settings

from conftest import ADDR_0, ADDR_1, KEY_0, KEY_1, token_of


def test_load_settings_from_config():
    settings = load_settings(config)

    assert [t.symbol for t in settings.tokens] == ["USDC", "USDT", "BTC", "GOLD", "TSLA", "NVIDIA"]
    assert token_of(settings, "BTC").decimals == 8
    assert token_of(settings, "USDC").address == Web3.to_checksum_address(config.TOKENS["USDC"][0])
    assert settings.router == Web3.to_checksum_address(config.ROUTER)
    assert settings.interest_rate_mode == 2
    assert settings.gas_price_gwei == 5
    assert settings.chain_id == 688688
    assert os.path.isabs(settings.private_keys_file)
    assert os.path.dirname(settings.private_keys_file) == os.path.dirname(os.path.abspath(config.__file__))


def test_repay_amounts_match_borrow_amounts():
    for token in load_settings(config).tokens:
        assert token.repay_amount == token.borrow_amount


def test_settings_are_immutable(settings):
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.router = ADDR_0
    with pytest.raises(dataclasses.FrozenInstanceError):
        settings.tokens[0].decimals = 2


def test_duplicate_symbols_rejected(settings):
    usdc = settings.tokens[0]
    with pytest.raises(ValueError):
        dataclasses.replace(settings, tokens=(usdc, usdc))


def test_empty_tokens_rejected(settings):
    with pytest.raises(ValueError):
        dataclasses.replace(settings, tokens=())


def test_invalid_token_address_rejected():
    with pytest.raises(ValueError):
        build_tokens({"BAD": ("0x1234", 6, "1", "1", "1")})


@pytest.mark.parametrize("delay", [(10, 5), (-1, 3)])
def test_invalid_wallet_delay_rejected(settings, delay):
    with pytest.raises(ValueError):
        dataclasses.replace(settings, delay_between_wallets=delay)


def test_load_private_keys_skips_blank_lines(tmp_path):
    path = tmp_path / "keys.txt"
    path.write_text(f"{KEY_0}\n\n   \n{KEY_1}\n\n")

    assert load_private_keys(str(path)) == [KEY_0, KEY_1]


def test_load_wallets_derives_addresses(tmp_path):
    path = tmp_path / "keys.txt"
    path.write_text(f"  {KEY_0}  \n{KEY_1}\n")

    wallets = load_wallets(str(path))

    assert [w.address for w in wallets] == [ADDR_0, ADDR_1]
    assert wallets[0].account.address == ADDR_0
    assert wallets[0].short == ADDR_0[-8:]


def test_load_wallets_empty_file(tmp_path):
    path = tmp_path / "keys.txt"
    path.write_text("\n\n")

    assert load_wallets(str(path)) == []


def test_load_wallets_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_wallets(str(tmp_path / "nope.txt"))


def test_wallet_context_is_frozen():
    wallet = WalletContext.from_key(KEY_0)
    with pytest.raises(dataclasses.FrozenInstanceError):
        wallet.address = ADDR_1
