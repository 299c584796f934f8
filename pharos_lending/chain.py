from web3 import Web3, HTTPProvider

from pharos_lending.account_loader import WalletContext

ERC20_ABI = [
    {"constant": True, "inputs": [{"name": "owner", "type": "address"}, {"name": "spender", "type": "address"}], "name": "allowance", "outputs": [{"name": "", "type": "uint256"}], "type": "function"},
    {"constant": False, "inputs": [{"name": "spender", "type": "address"}, {"name": "amount", "type": "uint256"}], "name": "approve", "outputs": [{"name": "", "type": "bool"}], "type": "function"}
]

MINT_ABI = [{
    "inputs": [{"name": "_asset", "type": "address"},
               {"name": "_account", "type": "address"},
               {"name": "_amount", "type": "uint256"}],
    "name": "mint",
    "outputs": [],
    "stateMutability": "nonpayable",
    "type": "function"
}]

POOL_ABI = [
    {
        "inputs": [
            {"name": "asset", "type": "address"},
            {"name": "amount", "type": "uint256"},
            {"name": "onBehalfOf", "type": "address"},
            {"name": "referralCode", "type": "uint16"}
        ],
        "name": "supply",
        "outputs": [],
        "stateMutability": "nonpayable",
        "type": "function"
    },
    {
        "inputs": [
            {"name": "asset", "type": "address"},
            {"name": "amount", "type": "uint256"},
            {"name": "to", "type": "address"}
        ],
        "name": "withdraw",
        "outputs": [{"name": "amountWithdrawn", "type": "uint256"}],
        "stateMutability": "nonpayable",
        "type": "function"
    }
]


class TransactionReverted(Exception):
    def __init__(self, tx_hash: str):
        super().__init__(f"transaction reverted: {tx_hash}")
        self.tx_hash = tx_hash


def describe_error(e: Exception) -> str:
    """Текст причини для логів: reason контракту / повідомлення RPC / str(e)."""
    message = getattr(e, "message", None)
    if isinstance(message, str) and message:
        return message
    if e.args and isinstance(e.args[0], dict) and "message" in e.args[0]:
        return str(e.args[0]["message"])
    return str(e) or type(e).__name__


def create_web3(rpc: str) -> Web3:
    return Web3(HTTPProvider(rpc))


class ChainClient:
    """
    Один Web3 хендл на весь запуск. Кожна транзакція підписується локально
    ключем гаманця і відправляється з фіксованим gasPrice.
    """

    def __init__(self, w3: Web3, gas_price_gwei: int = 5, chain_id: int | None = None, mint_router: str | None = None):
        self.w3 = w3
        self.gas_price = Web3.to_wei(gas_price_gwei, "gwei")
        self.chain_id = chain_id
        self.mint_router = mint_router

    def _tx_params(self, wallet: WalletContext) -> dict:
        if self.chain_id is None:
            self.chain_id = self.w3.eth.chain_id
        return {
            "from": wallet.address,
            "nonce": self.w3.eth.get_transaction_count(wallet.address, "pending"),
            "gasPrice": self.gas_price,
            "chainId": self.chain_id,
        }

    def _send(self, wallet: WalletContext, tx: dict) -> str:
        signed = wallet.account.sign_transaction(tx)
        tx_hash = self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(tx_hash)

    def _transact(self, wallet: WalletContext, fn) -> str:
        tx = fn.build_transaction(self._tx_params(wallet))
        return self._send(wallet, tx)

    def allowance(self, token: str, owner: str, spender: str) -> int:
        contract = self.w3.eth.contract(address=token, abi=ERC20_ABI)
        return contract.functions.allowance(owner, spender).call()

    def mint(self, wallet: WalletContext, token: str, amount: int) -> str:
        contract = self.w3.eth.contract(address=self.mint_router, abi=MINT_ABI)
        return self._transact(wallet, contract.functions.mint(token, wallet.address, amount))

    def approve(self, wallet: WalletContext, token: str, spender: str, amount: int) -> str:
        contract = self.w3.eth.contract(address=token, abi=ERC20_ABI)
        return self._transact(wallet, contract.functions.approve(spender, amount))

    def supply(self, wallet: WalletContext, pool: str, asset: str, amount: int, on_behalf_of: str, referral_code: int = 0) -> str:
        contract = self.w3.eth.contract(address=pool, abi=POOL_ABI)
        return self._transact(wallet, contract.functions.supply(asset, amount, on_behalf_of, referral_code))

    def withdraw(self, wallet: WalletContext, pool: str, asset: str, amount: int, to: str) -> str:
        contract = self.w3.eth.contract(address=pool, abi=POOL_ABI)
        return self._transact(wallet, contract.functions.withdraw(asset, amount, to))

    def send_raw(self, wallet: WalletContext, to: str, data: bytes) -> str:
        tx = self._tx_params(wallet)
        tx.update({"to": Web3.to_checksum_address(to), "value": 0, "data": Web3.to_hex(data)})
        tx["gas"] = self.w3.eth.estimate_gas(tx)
        return self._send(wallet, tx)

    def wait(self, tx_hash: str):
        receipt = self.w3.eth.wait_for_transaction_receipt(tx_hash)
        if receipt["status"] == 0:
            raise TransactionReverted(tx_hash)
        return receipt
