"""
pytest 공통 fixture 정의

인메모리 SQLite 원장, 고정 시계, 임시 설정 파일
"""

import tempfile
from datetime import datetime
from decimal import Decimal
from pathlib import Path

import pytest
import pytest_asyncio

from adapters.db.sqlite_adapter import SQLiteAdapter
from core.config.loader import AccountSeed
from core.ledger.account_store import AccountStore
from core.ledger.schema import init_schema
from core.ledger.service import LedgerService
from core.types import AccountType
from core.utils.timezone import LOCAL_TZ

# 테스트 기준 시각: 2026-10-19 10:00 (UTC+05:30)
FIXED_NOW = datetime(2026, 10, 19, 10, 0, tzinfo=LOCAL_TZ)

TEST_ACCOUNTS = (
    AccountSeed("drawer", "Cash Drawer", AccountType.DRAWER),
    AccountSeed("cash-in-hand", "Cash in Hand", AccountType.CASH_IN_HAND),
    AccountSeed("business", "Business Account", AccountType.BUSINESS),
)


class FixedClock:
    """테스트용 고정 시계"""

    def __init__(self, now: datetime = FIXED_NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def temp_dir() -> Path:
    """OS 독립적인 임시 디렉토리 생성"""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def temp_settings_file(temp_dir: Path) -> Path:
    """테스트용 settings.yaml 파일 생성"""
    settings_content = """# 테스트용 settings.yaml
ledger:
  db_path: ":memory:"
  utc_offset_minutes: 330
  currency_decimals: 2
  lock_timeout_sec: 5
  default_page_size: 20
  max_page_size: 50

web:
  host: "0.0.0.0"
  port: 9000

accounts:
  - id: drawer
    name: Cash Drawer
    type: drawer
    opening_balance: "250.00"
  - id: business
    name: Business Account
    type: business

categories:
  - Sales
  - Rent
"""
    settings_path = temp_dir / "settings.yaml"
    settings_path.write_text(settings_content, encoding="utf-8")
    return settings_path


@pytest.fixture
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture
def clock(fixed_now: datetime) -> FixedClock:
    return FixedClock(fixed_now)


@pytest_asyncio.fixture
async def db() -> SQLiteAdapter:
    """스키마가 초기화된 인메모리 DB"""
    adapter = SQLiteAdapter(":memory:", lock_timeout=5)
    await adapter.connect()
    await init_schema(adapter)
    yield adapter
    await adapter.close()


@pytest_asyncio.fixture
async def account_store(db: SQLiteAdapter) -> AccountStore:
    """기본 계정 3개 (잔액 0)"""
    store = AccountStore(db)
    await store.ensure_accounts(TEST_ACCOUNTS)
    return store


@pytest_asyncio.fixture
async def ledger(
    db: SQLiteAdapter,
    account_store: AccountStore,
    clock: FixedClock,
) -> LedgerService:
    return LedgerService(
        db,
        account_store,
        minor_unit=Decimal("0.01"),
        clock=clock,
        tz=LOCAL_TZ,
    )
