from eth_abi import encode
from eth_abi.exceptions import EncodingError as AbiEncodingError
from eth_utils import is_hex_address, to_canonical_address

MAX_UINT256 = 2**256 - 1
RESERVED_SLOT = b"\x00" * 32  # referralCode у borrow, не використовується


class EncodingError(ValueError):
    pass


def normalize_selector(selector) -> bytes:
    if isinstance(selector, (bytes, bytearray)):
        raw = bytes(selector)
    elif isinstance(selector, str):
        text = selector[2:] if selector.startswith(("0x", "0X")) else selector
        try:
            raw = bytes.fromhex(text)
        except ValueError:
            raise EncodingError(f"Selector is not hex: {selector!r}")
    else:
        raise EncodingError(f"Unsupported selector type: {type(selector).__name__}")
    if len(raw) != 4:
        raise EncodingError(f"Selector must be 4 bytes, got {len(raw)}")
    return raw


def pad32(value) -> bytes:
    """32-байтне слово: адреса (hex-рядок або 20 байт) або uint256."""
    if isinstance(value, str):
        if not is_hex_address(value):
            raise EncodingError(f"Invalid address: {value!r}")
        return encode(["address"], [to_canonical_address(value)])
    if isinstance(value, (bytes, bytearray)):
        if len(value) != 20:
            raise EncodingError(f"Address must be 20 bytes, got {len(value)}")
        return encode(["address"], [bytes(value)])
    if isinstance(value, bool) or not isinstance(value, int):
        raise EncodingError(f"Expected integer, got {type(value).__name__}")
    if value < 0 or value > MAX_UINT256:
        raise EncodingError(f"Integer out of uint256 range: {value}")
    try:
        return encode(["uint256"], [value])
    except AbiEncodingError as e:
        raise EncodingError(str(e)) from e


def _address_word(value) -> bytes:
    if isinstance(value, int):
        raise EncodingError(f"Expected address, got integer {value}")
    return pad32(value)


def _uint_word(value) -> bytes:
    if isinstance(value, (str, bytes, bytearray)):
        raise EncodingError(f"Expected integer, got {value!r}")
    return pad32(value)


def encode_router_data(selector, asset, amount: int, rate_mode, on_behalf_of) -> bytes:
    """
    selector || asset || amount [|| rate_mode || 0x00..00] || on_behalf_of

    Формат raw виклику borrow/repay на роутері; блок rate_mode додається лише якщо він не None.
    """
    data = normalize_selector(selector) + _address_word(asset) + _uint_word(amount)
    if rate_mode is not None:
        data += _uint_word(rate_mode) + RESERVED_SLOT
    data += _address_word(on_behalf_of)
    return data
