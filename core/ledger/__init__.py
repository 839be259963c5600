"""
현금 원장 (Cash Ledger)

계정 잔액과 거래 기록을 항상 일관되게 유지하는 원장.
잔액 변경은 AccountStore.apply_delta 하나로만 이루어지고
모든 변경은 ledger_entry 분개로 남는다.

사용 예시:
```python
from core.ledger import LedgerService, QueryView, IncomeInput, init_schema

await init_schema(db)
ledger = LedgerService(db)
await ledger.accounts.ensure_accounts(settings.accounts)

tx = await ledger.create(IncomeInput(
    name="Daily sales",
    amount=Decimal("1000"),
    account_id="drawer",
    transaction_date=datetime.now(),
))

snapshot = await ledger.snapshot()
result = QueryView().query(snapshot, TransactionFilter(search="sales"))

# 잔액 ↔ 분개 검증
drifts = await ledger.verify()
```
"""

from core.ledger.account_store import AccountStore
from core.ledger.effects import compute_effects, effect, effect_sign, reverse, reverse_effects
from core.ledger.errors import (
    AccountNotFoundError,
    LedgerBusyError,
    LedgerError,
    TransactionNotFoundError,
    ValidationError,
)
from core.ledger.models import (
    Account,
    BalanceDrift,
    CashTransaction,
    Effect,
    EntryRef,
    ExpenseInput,
    IncomeInput,
    LedgerEntry,
    LedgerSnapshot,
    TransactionInput,
    TransferInput,
    build_input,
)
from core.ledger.query import (
    LedgerSummary,
    Page,
    QueryResult,
    QueryView,
    TransactionFilter,
    page_numbers,
    paginate,
)
from core.ledger.schema import init_schema
from core.ledger.service import LedgerService

__all__ = [
    # 핵심 클래스
    "AccountStore",
    "LedgerService",
    "QueryView",
    "init_schema",
    # 모델
    "Account",
    "BalanceDrift",
    "CashTransaction",
    "Effect",
    "EntryRef",
    "ExpenseInput",
    "IncomeInput",
    "LedgerEntry",
    "LedgerSnapshot",
    "TransactionInput",
    "TransferInput",
    "build_input",
    # 조회
    "LedgerSummary",
    "Page",
    "QueryResult",
    "TransactionFilter",
    "page_numbers",
    "paginate",
    # 효과
    "compute_effects",
    "effect",
    "effect_sign",
    "reverse",
    "reverse_effects",
    # 오류
    "LedgerError",
    "ValidationError",
    "TransactionNotFoundError",
    "AccountNotFoundError",
    "LedgerBusyError",
]
