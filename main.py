import sys
import asyncio

import config
from pharos_lending.settings import load_settings
from pharos_lending.account_loader import load_wallets
from pharos_lending.chain import ChainClient, create_web3
from pharos_lending.workflow import LendingWorkflow


async def main(cfg=config, client=None) -> int:
    try:
        settings = load_settings(cfg)
        wallets = load_wallets(settings.private_keys_file)
        if not wallets:
            print(f"❌ No private keys found in {settings.private_keys_file}")
            return 1

        if client is None:
            client = ChainClient(
                create_web3(settings.rpc_url),
                gas_price_gwei=settings.gas_price_gwei,
                chain_id=settings.chain_id,
                mint_router=settings.mint_router,
            )

        reports = await LendingWorkflow(settings, client).run_all(wallets)
    except Exception as e:
        print(f"❌ Fatal error: {e}")
        return 1

    failed = sum(len(r.failures()) for r in reports)
    print(f"\n✅ Оброблено гаманців: {len(reports)}, невдалих кроків: {failed}")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
