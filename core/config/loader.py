"""
설정 로더

settings.yaml 로드 및 원장 설정 생성
"""

import logging
from dataclasses import dataclass, field
from datetime import timezone
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from core.constants import PROJECT_ROOT, Defaults, Paths
from core.types import AccountType
from core.utils.timezone import make_timezone

logger = logging.getLogger(__name__)


# 기본 계정 (settings.yaml에 accounts가 없을 때)
DEFAULT_ACCOUNTS: list[tuple[str, str, str]] = [
    # (account_id, name, account_type)
    ("drawer", "Cash Drawer", "drawer"),
    ("cash-in-hand", "Cash in Hand", "cash_in_hand"),
    ("business", "Business Account", "business"),
]

# 기본 카테고리 ("Other" + 지출 카테고리)
DEFAULT_CATEGORIES: list[str] = [
    "Other",
    "Sales",
    "Rent",
    "Utilities",
    "Salaries",
    "Supplies",
    "Transport",
    "Maintenance",
    "Marketing",
    "Bank Deposit",
]


@dataclass(frozen=True)
class AccountSeed:
    """초기 계정 정의

    앱 시작 시 계정이 없으면 생성한다. 이미 있으면 무시.
    """

    account_id: str
    name: str
    account_type: AccountType
    opening_balance: Decimal = Decimal("0")


@dataclass(frozen=True)
class LedgerSettings:
    """원장 설정 (settings.yaml에서 로드)

    불변 데이터 구조로 설정 변경 방지
    """

    db_path: str = Defaults.DB_PATH
    utc_offset_minutes: int = Defaults.UTC_OFFSET_MINUTES
    currency_decimals: int = Defaults.CURRENCY_DECIMALS
    lock_timeout_sec: float = Defaults.LOCK_TIMEOUT_SEC
    default_page_size: int = Defaults.DEFAULT_PAGE_SIZE
    max_page_size: int = Defaults.MAX_PAGE_SIZE
    web_host: str = Defaults.WEB_HOST
    web_port: int = Defaults.WEB_PORT
    categories: tuple[str, ...] = tuple(DEFAULT_CATEGORIES)
    accounts: tuple[AccountSeed, ...] = field(
        default_factory=lambda: tuple(
            AccountSeed(account_id, name, AccountType(account_type))
            for account_id, name, account_type in DEFAULT_ACCOUNTS
        )
    )

    @property
    def local_tz(self) -> timezone:
        """로컬 타임존"""
        return make_timezone(self.utc_offset_minutes)

    @property
    def minor_unit(self) -> Decimal:
        """통화 최소 단위 (예: 0.01)"""
        return Decimal(1).scaleb(-self.currency_decimals)


class SettingsLoadError(Exception):
    """Settings 로드 실패 예외"""

    pass


def _parse_accounts(
    raw: Any,
    currency_decimals: int = Defaults.CURRENCY_DECIMALS,
) -> tuple[AccountSeed, ...]:
    """accounts 섹션 파싱

    opening_balance는 유한한 숫자이고 통화 최소 단위 이내여야 한다.
    """
    minor_unit = Decimal(1).scaleb(-currency_decimals)
    if not isinstance(raw, list) or not raw:
        raise SettingsLoadError("settings.yaml의 'accounts'는 비어 있지 않은 목록이어야 합니다")

    seeds: list[AccountSeed] = []
    seen: set[str] = set()
    for item in raw:
        if not isinstance(item, dict):
            raise SettingsLoadError(f"계정 정의 형식이 잘못되었습니다: {item!r}")

        account_id = item.get("id")
        name = item.get("name")
        if not account_id or not name:
            raise SettingsLoadError(f"계정 정의에 'id'와 'name'이 필요합니다: {item!r}")
        if account_id in seen:
            raise SettingsLoadError(f"중복된 계정 ID: {account_id}")
        seen.add(account_id)

        type_str = item.get("type", AccountType.OTHER.value)
        try:
            account_type = AccountType(type_str)
        except ValueError as e:
            valid_types = [t.value for t in AccountType]
            raise SettingsLoadError(
                f"유효하지 않은 계정 유형입니다: '{type_str}'. 유효한 값: {valid_types}"
            ) from e

        try:
            opening_balance = Decimal(str(item.get("opening_balance", "0")))
        except InvalidOperation as e:
            raise SettingsLoadError(
                f"계정 {account_id}의 opening_balance가 숫자가 아닙니다"
            ) from e

        if not opening_balance.is_finite():
            raise SettingsLoadError(
                f"계정 {account_id}의 opening_balance가 유한한 숫자가 아닙니다: {opening_balance}"
            )
        try:
            normalized = opening_balance.quantize(minor_unit)
        except InvalidOperation as e:
            raise SettingsLoadError(
                f"계정 {account_id}의 opening_balance가 너무 큽니다: {opening_balance}"
            ) from e
        if normalized != opening_balance:
            raise SettingsLoadError(
                f"계정 {account_id}의 opening_balance가 최소 단위({minor_unit})보다 정밀합니다: "
                f"{opening_balance}"
            )
        opening_balance = normalized

        seeds.append(
            AccountSeed(
                account_id=str(account_id),
                name=str(name),
                account_type=account_type,
                opening_balance=opening_balance,
            )
        )

    return tuple(seeds)


def parse_settings(data: dict[str, Any]) -> LedgerSettings:
    """YAML 딕셔너리를 LedgerSettings로 변환

    Raises:
        SettingsLoadError: 값의 형식이 잘못된 경우
    """
    kwargs: dict[str, Any] = {}

    ledger = data.get("ledger", {}) or {}
    if not isinstance(ledger, dict):
        raise SettingsLoadError("settings.yaml의 'ledger' 섹션은 매핑이어야 합니다")

    try:
        if "db_path" in ledger:
            kwargs["db_path"] = str(ledger["db_path"])
        if "utc_offset_minutes" in ledger:
            kwargs["utc_offset_minutes"] = int(ledger["utc_offset_minutes"])
        if "currency_decimals" in ledger:
            kwargs["currency_decimals"] = int(ledger["currency_decimals"])
        if "lock_timeout_sec" in ledger:
            kwargs["lock_timeout_sec"] = float(ledger["lock_timeout_sec"])
        if "default_page_size" in ledger:
            kwargs["default_page_size"] = int(ledger["default_page_size"])
        if "max_page_size" in ledger:
            kwargs["max_page_size"] = int(ledger["max_page_size"])
    except (TypeError, ValueError) as e:
        raise SettingsLoadError(f"ledger 설정 값이 잘못되었습니다: {e}") from e

    if kwargs.get("currency_decimals", 0) < 0:
        raise SettingsLoadError("currency_decimals는 0 이상이어야 합니다")
    if kwargs.get("lock_timeout_sec", 1) <= 0:
        raise SettingsLoadError("lock_timeout_sec는 0보다 커야 합니다")

    default_page_size = kwargs.get("default_page_size", Defaults.DEFAULT_PAGE_SIZE)
    max_page_size = kwargs.get("max_page_size", Defaults.MAX_PAGE_SIZE)
    if not 1 <= default_page_size <= max_page_size:
        raise SettingsLoadError(
            f"페이지 크기 설정이 잘못되었습니다: default={default_page_size}, max={max_page_size}"
        )

    web = data.get("web", {}) or {}
    if not isinstance(web, dict):
        raise SettingsLoadError("settings.yaml의 'web' 섹션은 매핑이어야 합니다")

    if "host" in web:
        kwargs["web_host"] = str(web["host"])
    if "port" in web:
        try:
            kwargs["web_port"] = int(web["port"])
        except (TypeError, ValueError) as e:
            raise SettingsLoadError(f"web.port 값이 잘못되었습니다: {web['port']!r}") from e

    if "categories" in data:
        categories = data["categories"]
        if not isinstance(categories, list):
            raise SettingsLoadError("settings.yaml의 'categories'는 목록이어야 합니다")
        kwargs["categories"] = tuple(str(c) for c in categories)

    if "accounts" in data:
        kwargs["accounts"] = _parse_accounts(
            data["accounts"],
            kwargs.get("currency_decimals", Defaults.CURRENCY_DECIMALS),
        )

    return LedgerSettings(**kwargs)


def resolve_db_path(db_path: str) -> Path | str:
    """DB 경로 해석

    ":memory:"는 그대로, 상대 경로는 프로젝트 루트 기준으로 변환.
    """
    if db_path == ":memory:":
        return db_path

    path = Path(db_path)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


def load_settings(path: Path | None = None) -> LedgerSettings:
    """settings.yaml 파일 로드

    파일이 없으면 기본값을 사용한다.

    Args:
        path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        LedgerSettings 인스턴스

    Raises:
        SettingsLoadError: 형식이 잘못된 경우
    """
    if path is None:
        path = Paths.SETTINGS_FILE

    if not path.exists():
        logger.info(f"settings.yaml 없음, 기본 설정 사용: {path}")
        return LedgerSettings()

    try:
        content = path.read_text(encoding="utf-8")
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise SettingsLoadError(f"settings.yaml 파싱 실패: {e}") from e

    if data is None:
        return LedgerSettings()

    if not isinstance(data, dict):
        raise SettingsLoadError("settings.yaml 최상위는 매핑이어야 합니다")

    return parse_settings(data)


class Settings:
    """애플리케이션 설정 (싱글턴 패턴)

    settings.yaml을 로드하고 관련 설정을 제공
    """

    _instance: "Settings | None" = None
    _ledger: LedgerSettings | None = None

    def __new__(cls, settings_path: Path | None = None) -> "Settings":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, settings_path: Path | None = None) -> None:
        if self._ledger is None:
            self._ledger = load_settings(settings_path)

    @property
    def ledger(self) -> LedgerSettings:
        """원장 설정"""
        assert self._ledger is not None
        return self._ledger

    @property
    def db_path(self) -> Path | str:
        """DB 경로 (":memory:" 허용)"""
        return resolve_db_path(self.ledger.db_path)

    @classmethod
    def reset(cls) -> None:
        """싱글턴 인스턴스 초기화 (테스트용)"""
        cls._instance = None
        cls._ledger = None


def get_settings(settings_path: Path | None = None) -> Settings:
    """Settings 인스턴스 반환

    Args:
        settings_path: settings.yaml 경로 (None이면 기본 경로 사용)

    Returns:
        Settings 싱글턴 인스턴스
    """
    return Settings(settings_path)
