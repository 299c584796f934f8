# RPC endpoint
RPC = "https://testnet.dplabs-internal.com"
CHAIN_ID = 688688  # Pharos testnet

# Контракти
ROUTER = "0xad3b4e20412a097f87cd8e8d84fbbe17ac7c89e9"        # lending pool router
MINT_ROUTER = "0x2e9d89d372837f71cb529e5ba85bfbc1785c69cd"   # mint тестових токенів

# symbol: (address, decimals, mint, borrow, repay)
TOKENS = {
    "USDC": ("0x48249feEb47a8453023f702f15CF00206eeBdF08", 6, "100", "0.1", "0.1"),
    "USDT": ("0x0B00Fb1F513E02399667FBA50772B21f34c1b5D9", 6, "100", "0.1", "0.1"),
    "BTC": ("0xA4a967FC7cF0E9815bF5c2700A055813628b65BE", 8, "100", "0.00001", "0.00001"),
    "GOLD": ("0x77f532df5f46DdFf1c97CDae3115271A523fa0f4", 18, "100", "0.0002", "0.0002"),
    "TSLA": ("0xCDA3DF4AAB8a571688fE493EB1BdC1Ad210C09E4", 18, "100", "0.00005", "0.00005"),
    "NVIDIA": ("0x3299cc551B2a39926Bf14144e65630e533dF6944", 18, "100", "0.00003", "0.00003"),
}

# Селектори для raw викликів роутера
BORROW_SELECTOR = "a415bcad"   # borrow(address,uint256,uint256,uint16,address)
REPAY_SELECTOR = "26a4e8d2"    # repay(address,uint256,uint256,address)
INTEREST_RATE_MODE = 2
REFERRAL_CODE = 0

GAS_PRICE_GWEI = 5

# Supply: випадкова сума в діапазоні (від, до), withdraw = 1/WITHDRAW_DIVISOR від неї
SUPPLY_RANGE = (50, 80)
WITHDRAW_DIVISOR = 10

PRIVATE_KEYS_FILE = "private_keys.txt"
DELAY_BETWEEN_WALLETS = (0, 0)          # Затримка між гаманцями, сек (від, до)
