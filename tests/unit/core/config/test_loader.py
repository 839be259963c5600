"""
core/config/loader.py 테스트

settings.yaml 로드, 검증, 원장 설정 생성 테스트
"""

from decimal import Decimal
from pathlib import Path

import pytest

from core.config.loader import (
    AccountSeed,
    LedgerSettings,
    Settings,
    SettingsLoadError,
    get_settings,
    load_settings,
    parse_settings,
    resolve_db_path,
)
from core.constants import PROJECT_ROOT, Defaults
from core.types import AccountType


class TestLedgerSettings:
    """LedgerSettings 데이터클래스 테스트"""

    def test_defaults(self) -> None:
        """기본값"""
        settings = LedgerSettings()

        assert settings.db_path == ":memory:"
        assert settings.utc_offset_minutes == 330
        assert settings.currency_decimals == 2
        assert [a.account_id for a in settings.accounts] == [
            "drawer",
            "cash-in-hand",
            "business",
        ]
        assert "Other" in settings.categories

    def test_frozen(self) -> None:
        """불변성 확인"""
        settings = LedgerSettings()

        with pytest.raises(AttributeError):
            settings.db_path = "other.db"  # type: ignore

    def test_minor_unit(self) -> None:
        """소수점 자릿수 → 최소 단위"""
        assert LedgerSettings(currency_decimals=2).minor_unit == Decimal("0.01")
        assert LedgerSettings(currency_decimals=0).minor_unit == Decimal("1")

    def test_local_tz(self) -> None:
        """UTC 오프셋 → 타임존"""
        tz = LedgerSettings(utc_offset_minutes=-300).local_tz

        assert tz.utcoffset(None).total_seconds() == -300 * 60


class TestParseSettings:
    """parse_settings 테스트"""

    def test_empty_dict_uses_defaults(self) -> None:
        """빈 설정 → 기본값"""
        assert parse_settings({}) == LedgerSettings()

    def test_ledger_section(self) -> None:
        """ledger 섹션 파싱"""
        settings = parse_settings({
            "ledger": {
                "db_path": "data/x.db",
                "utc_offset_minutes": 0,
                "currency_decimals": 3,
                "lock_timeout_sec": 2.5,
                "default_page_size": 5,
                "max_page_size": 20,
            }
        })

        assert settings.db_path == "data/x.db"
        assert settings.utc_offset_minutes == 0
        assert settings.currency_decimals == 3
        assert settings.lock_timeout_sec == 2.5
        assert settings.default_page_size == 5
        assert settings.max_page_size == 20

    def test_accounts_section(self) -> None:
        """accounts 섹션 파싱 (opening_balance는 Decimal)"""
        settings = parse_settings({
            "accounts": [
                {"id": "till", "name": "Till", "type": "drawer", "opening_balance": "100.50"},
                {"id": "misc", "name": "Misc"},
            ]
        })

        assert settings.accounts == (
            AccountSeed("till", "Till", AccountType.DRAWER, Decimal("100.50")),
            AccountSeed("misc", "Misc", AccountType.OTHER, Decimal("0")),
        )

    def test_invalid_account_type(self) -> None:
        """잘못된 계정 유형"""
        with pytest.raises(SettingsLoadError, match="유효하지 않은 계정 유형"):
            parse_settings({"accounts": [{"id": "a", "name": "A", "type": "vault"}]})

    def test_duplicate_account_id(self) -> None:
        """중복 계정 ID"""
        with pytest.raises(SettingsLoadError, match="중복"):
            parse_settings({
                "accounts": [
                    {"id": "a", "name": "A"},
                    {"id": "a", "name": "B"},
                ]
            })

    def test_invalid_opening_balance(self) -> None:
        """숫자가 아닌 기초 잔액"""
        with pytest.raises(SettingsLoadError):
            parse_settings({"accounts": [{"id": "a", "name": "A", "opening_balance": "lots"}]})

    @pytest.mark.parametrize("balance", ["NaN", "Infinity", "-Infinity"])
    def test_non_finite_opening_balance(self, balance: str) -> None:
        """유한하지 않은 기초 잔액"""
        with pytest.raises(SettingsLoadError, match="유한한"):
            parse_settings({"accounts": [{"id": "a", "name": "A", "opening_balance": balance}]})

    def test_opening_balance_precision(self) -> None:
        """통화 최소 단위보다 정밀한 기초 잔액"""
        with pytest.raises(SettingsLoadError, match="정밀"):
            parse_settings({"accounts": [{"id": "a", "name": "A", "opening_balance": "1.005"}]})

        with pytest.raises(SettingsLoadError, match="정밀"):
            parse_settings({
                "ledger": {"currency_decimals": 0},
                "accounts": [{"id": "a", "name": "A", "opening_balance": "1.5"}],
            })

    def test_opening_balance_normalized(self) -> None:
        """지수 표기 기초 잔액은 최소 단위 자릿수로 정규화"""
        settings = parse_settings({"accounts": [{"id": "a", "name": "A", "opening_balance": "1E+3"}]})

        assert str(settings.accounts[0].opening_balance) == "1000.00"

    def test_negative_decimals(self) -> None:
        """음수 소수점 자릿수"""
        with pytest.raises(SettingsLoadError):
            parse_settings({"ledger": {"currency_decimals": -1}})

    def test_non_positive_lock_timeout(self) -> None:
        """0 이하 락 대기 시간"""
        with pytest.raises(SettingsLoadError):
            parse_settings({"ledger": {"lock_timeout_sec": 0}})

    def test_default_page_size_above_max(self) -> None:
        """기본 페이지 크기 > 최대"""
        with pytest.raises(SettingsLoadError, match="페이지 크기"):
            parse_settings({"ledger": {"default_page_size": 50, "max_page_size": 10}})

    def test_invalid_web_port(self) -> None:
        """숫자가 아닌 포트"""
        with pytest.raises(SettingsLoadError, match="web.port"):
            parse_settings({"web": {"port": "http"}})

    @pytest.mark.parametrize("web", [5, "localhost", ["host"]])
    def test_web_section_must_be_mapping(self, web) -> None:
        with pytest.raises(SettingsLoadError, match="'web'"):
            parse_settings({"web": web})

    def test_categories_must_be_list(self) -> None:
        """categories는 목록"""
        with pytest.raises(SettingsLoadError):
            parse_settings({"categories": "Sales"})


class TestLoadSettings:
    """load_settings 테스트"""

    def test_load_file(self, temp_settings_file: Path) -> None:
        """정상 로드"""
        settings = load_settings(temp_settings_file)

        assert settings.db_path == ":memory:"
        assert settings.lock_timeout_sec == 5
        assert settings.default_page_size == 20
        assert settings.web_host == "0.0.0.0"
        assert settings.web_port == 9000
        assert settings.categories == ("Sales", "Rent")
        assert settings.accounts[0].opening_balance == Decimal("250.00")

    def test_missing_file_uses_defaults(self, temp_dir: Path) -> None:
        """파일 없음 → 기본값"""
        assert load_settings(temp_dir / "nope.yaml") == LedgerSettings()

    def test_empty_file_uses_defaults(self, temp_dir: Path) -> None:
        """빈 파일 → 기본값"""
        path = temp_dir / "empty.yaml"
        path.write_text("", encoding="utf-8")

        assert load_settings(path) == LedgerSettings()

    def test_malformed_yaml(self, temp_dir: Path) -> None:
        """YAML 문법 오류"""
        path = temp_dir / "bad.yaml"
        path.write_text("ledger: [unclosed", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="파싱 실패"):
            load_settings(path)

    def test_non_mapping_root(self, temp_dir: Path) -> None:
        """최상위가 매핑이 아님"""
        path = temp_dir / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")

        with pytest.raises(SettingsLoadError, match="매핑"):
            load_settings(path)


class TestResolveDbPath:
    """resolve_db_path 테스트"""

    def test_memory(self) -> None:
        assert resolve_db_path(":memory:") == ":memory:"

    def test_relative_is_under_project_root(self) -> None:
        assert resolve_db_path("data/cash.db") == PROJECT_ROOT / "data" / "cash.db"

    def test_absolute_kept(self, temp_dir: Path) -> None:
        path = temp_dir / "cash.db"
        assert resolve_db_path(str(path)) == path


class TestSettingsSingleton:
    """Settings 싱글턴 테스트"""

    def setup_method(self) -> None:
        Settings.reset()

    def teardown_method(self) -> None:
        Settings.reset()

    def test_singleton(self, temp_settings_file: Path) -> None:
        """같은 인스턴스 반환"""
        first = get_settings(temp_settings_file)
        second = get_settings()

        assert first is second
        assert second.ledger.web_port == 9000

    def test_reset(self, temp_settings_file: Path, temp_dir: Path) -> None:
        """reset 후 다시 로드"""
        get_settings(temp_settings_file)
        Settings.reset()

        settings = get_settings(temp_dir / "missing.yaml")

        assert settings.ledger.web_port == Defaults.WEB_PORT

    def test_db_path_memory(self, temp_settings_file: Path) -> None:
        """":memory:"는 경로 변환 없음"""
        assert get_settings(temp_settings_file).db_path == ":memory:"
