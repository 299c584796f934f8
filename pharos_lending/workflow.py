import asyncio
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from pharos_lending.account_loader import WalletContext
from pharos_lending.calldata import MAX_UINT256, encode_router_data
from pharos_lending.chain import describe_error
from pharos_lending.settings import LendingSettings, TokenConfig
from pharos_lending.units import format_units, random_supply_amount, to_smallest_unit


class Phase(Enum):
    MINT = "Mint"
    APPROVE = "Approve"
    SUPPLY = "Supply"
    WITHDRAW = "Withdraw"
    BORROW = "Borrow"
    REPAY = "Repay"
    DONE = "Done"


TRANSITIONS = {
    Phase.MINT: Phase.APPROVE,
    Phase.APPROVE: Phase.SUPPLY,
    Phase.SUPPLY: Phase.WITHDRAW,
    Phase.WITHDRAW: Phase.BORROW,
    Phase.BORROW: Phase.REPAY,
    Phase.REPAY: Phase.DONE,
}


def _phase_order():
    order = []
    phase = Phase.MINT
    while phase is not Phase.DONE:
        order.append(phase)
        phase = TRANSITIONS[phase]
    return tuple(order)


PHASE_ORDER = _phase_order()


class StepStatus(Enum):
    CONFIRMED = "confirmed"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(frozen=True)
class StepResult:
    phase: Phase
    symbol: str
    status: StepStatus
    amount: int | None = None
    tx_hash: str | None = None
    reason: str | None = None

    @property
    def ok(self) -> bool:
        return self.status is not StepStatus.FAILED


@dataclass
class WalletReport:
    address: str
    steps: List[StepResult] = field(default_factory=list)
    supplied: Dict[str, int] = field(default_factory=dict)

    def for_phase(self, phase: Phase) -> List[StepResult]:
        return [s for s in self.steps if s.phase is phase]

    def failures(self) -> List[StepResult]:
        return [s for s in self.steps if not s.ok]

    def calls(self, phase: Phase) -> int:
        """Скільки транзакцій реально намагались відправити у фазі."""
        return sum(1 for s in self.for_phase(phase) if s.status is not StepStatus.SKIPPED)

    def summary(self) -> str:
        ok = sum(1 for s in self.steps if s.status is StepStatus.CONFIRMED)
        skipped = sum(1 for s in self.steps if s.status is StepStatus.SKIPPED)
        sent = sum(self.calls(phase) for phase in PHASE_ORDER)
        return f"tx {sent} | ✅ {ok} | ⏭️ {skipped} | ❌ {len(self.failures())}"


class LendingWorkflow:
    """
    Mint → Approve → Supply → Withdraw → Borrow → Repay для кожного гаманця.
    Помилка одного токена в одній фазі не зупиняє нічого іншого.
    """

    def __init__(self, settings: LendingSettings, client, rng=random):
        self.settings = settings
        self.client = client
        self.rng = rng
        self._handlers = {
            Phase.MINT: self._mint,
            Phase.APPROVE: self._approve,
            Phase.SUPPLY: self._supply,
            Phase.WITHDRAW: self._withdraw,
            Phase.BORROW: self._borrow,
            Phase.REPAY: self._repay,
        }

    async def run_all(self, wallets: List[WalletContext]) -> List[WalletReport]:
        reports = []
        for i, wallet in enumerate(wallets):
            reports.append(await self.run_wallet(wallet))
            if i < len(wallets) - 1:
                await self._delay_between_wallets()
        return reports

    async def _delay_between_wallets(self):
        low, high = self.settings.delay_between_wallets
        if high <= 0:
            return
        delay = self.rng.randint(low, high)
        print(f"⏳ Затримка між акаунтами: {delay}с")
        await asyncio.sleep(delay)

    async def run_wallet(self, wallet: WalletContext) -> WalletReport:
        print(f"\n======== WALLET: {wallet.address} ========")
        report = WalletReport(wallet.address)
        for phase in PHASE_ORDER:
            handler = self._handlers[phase]
            for token in self.settings.tokens:
                report.steps.append(await handler(wallet, token, report))
        print(f"[{wallet.short}] Готово: {report.summary()}")
        return report

    async def _submit(self, phase: Phase, token: TokenConfig, amount: int, send, *args) -> StepResult:
        label = phase.value
        tx_hash = None
        try:
            tx_hash = await asyncio.to_thread(send, *args)
            print(f"[{token.symbol}]   {label} tx: {tx_hash}")
            await asyncio.to_thread(self.client.wait, tx_hash)
        except Exception as e:
            reason = describe_error(e)
            print(f"[{token.symbol}]   {label} ❌ failed: {reason}")
            return StepResult(phase, token.symbol, StepStatus.FAILED, amount, tx_hash, reason)
        print(f"[{token.symbol}]   {label} ✅ confirmed")
        return StepResult(phase, token.symbol, StepStatus.CONFIRMED, amount, tx_hash)

    def _failed(self, phase: Phase, token: TokenConfig, e: Exception, amount=None) -> StepResult:
        reason = describe_error(e)
        print(f"[{token.symbol}]   {phase.value} ❌ failed: {reason}")
        return StepResult(phase, token.symbol, StepStatus.FAILED, amount, reason=reason)

    async def _mint(self, wallet, token, report) -> StepResult:
        try:
            amount = to_smallest_unit(token.mint_amount, token.decimals)
        except ValueError as e:
            return self._failed(Phase.MINT, token, e)
        print(f"[{token.symbol}] Minting {token.mint_amount} ({amount})...")
        return await self._submit(Phase.MINT, token, amount, self.client.mint, wallet, token.address, amount)

    async def _approve(self, wallet, token, report) -> StepResult:
        router = self.settings.router
        allowance = 0
        try:
            allowance = await asyncio.to_thread(self.client.allowance, token.address, wallet.address, router)
        except Exception as e:
            print(f"[{token.symbol}]   Allowance fetch error: {describe_error(e)}")

        if allowance >= MAX_UINT256 // 2:
            print(f"[{token.symbol}]   Already unlimited approval")
            return StepResult(Phase.APPROVE, token.symbol, StepStatus.SKIPPED, reason="already approved")

        print(f"[{token.symbol}] Approving router unlimited...")
        return await self._submit(Phase.APPROVE, token, MAX_UINT256, self.client.approve, wallet, token.address, router, MAX_UINT256)

    async def _supply(self, wallet, token, report) -> StepResult:
        low, high = self.settings.supply_range
        try:
            amount = random_supply_amount(low, high, token.decimals, self.rng)
        except ValueError as e:
            return self._failed(Phase.SUPPLY, token, e)
        # Записуємо до відправки: withdraw рахується від цієї суми навіть якщо supply не пройшов
        report.supplied[token.symbol] = amount
        print(f"[{token.symbol}] Supplying {format_units(amount, token.decimals)} ({amount})...")
        return await self._submit(
            Phase.SUPPLY, token, amount, self.client.supply,
            wallet, self.settings.router, token.address, amount, wallet.address, self.settings.referral_code,
        )

    async def _withdraw(self, wallet, token, report) -> StepResult:
        supplied = report.supplied.get(token.symbol)
        if supplied is None:
            print(f"[{token.symbol}]   Withdraw skipped: nothing recorded as supplied")
            return StepResult(Phase.WITHDRAW, token.symbol, StepStatus.SKIPPED, reason="no supply recorded")

        amount = supplied // self.settings.withdraw_divisor
        print(f"[{token.symbol}] Withdrawing {format_units(amount, token.decimals)} ({amount})...")
        return await self._submit(
            Phase.WITHDRAW, token, amount, self.client.withdraw,
            wallet, self.settings.router, token.address, amount, wallet.address,
        )

    async def _borrow(self, wallet, token, report) -> StepResult:
        return await self._raw_call(Phase.BORROW, wallet, token, token.borrow_amount, self.settings.borrow_selector)

    async def _repay(self, wallet, token, report) -> StepResult:
        return await self._raw_call(Phase.REPAY, wallet, token, token.repay_amount, self.settings.repay_selector)

    async def _raw_call(self, phase: Phase, wallet, token, amount_str: str, selector: str) -> StepResult:
        try:
            amount = to_smallest_unit(amount_str, token.decimals)
            data = encode_router_data(selector, token.address, amount, self.settings.interest_rate_mode, wallet.address)
        except ValueError as e:
            return self._failed(phase, token, e)

        verb = "Borrowing" if phase is Phase.BORROW else "Repaying"
        print(f"[{token.symbol}] {verb} {amount_str} ({amount})...")
        return await self._submit(phase, token, amount, self.client.send_raw, wallet, self.settings.router, data)
