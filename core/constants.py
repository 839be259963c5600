"""
하드코딩 상수 - 변경될 일이 거의 없는 고정값

중요: 경로는 반드시 pathlib.Path 사용 (Windows/Linux 크로스 플랫폼)
"""

from decimal import Decimal
from pathlib import Path


# 프로젝트 루트 (이 파일 기준 2단계 상위: core/constants.py → 프로젝트 루트)
PROJECT_ROOT: Path = Path(__file__).resolve().parent.parent

APP_NAME: str = "Cash Ledger API"
APP_VERSION: str = "1.0.0"


class Defaults:
    """기본값 상수 (settings.yaml 미지정 시 사용)"""

    WEB_HOST: str = "127.0.0.1"
    WEB_PORT: int = 8000

    # 스리랑카 표준시 (UTC+05:30)
    UTC_OFFSET_MINUTES: int = 330

    # 통화 최소 단위 (소수점 자릿수)
    CURRENCY_DECIMALS: int = 2

    # 쓰기 락 대기 한도 (초)
    LOCK_TIMEOUT_SEC: float = 10.0

    DEFAULT_PAGE_SIZE: int = 10
    MAX_PAGE_SIZE: int = 100

    DB_PATH: str = ":memory:"

    TRANSACTION_NUMBER_PREFIX: str = "TXN"
    TRANSACTION_NUMBER_WIDTH: int = 6

    ZERO: Decimal = Decimal("0")


class Paths:
    """프로젝트 경로 상수 (pathlib 사용 - OS 독립적)"""

    # 디렉토리
    CONFIG_DIR: Path = PROJECT_ROOT / "config"
    DATA_DIR: Path = PROJECT_ROOT / "data"
    LOGS_DIR: Path = PROJECT_ROOT / "logs"
    WEB_LOGS_DIR: Path = LOGS_DIR / "web"
    SCRIPT_LOGS_DIR: Path = LOGS_DIR / "scripts"

    # 설정 파일
    SETTINGS_FILE: Path = CONFIG_DIR / "settings.yaml"

    # DB 파일
    LEDGER_DB: Path = DATA_DIR / "cash_ledger.db"
