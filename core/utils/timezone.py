"""
타임존 유틸리티

내부 저장: 타임존 포함 ISO-8601 | 날짜 경계: 로컬 타임존 기준
naive datetime/날짜 문자열은 로컬 타임존으로 간주한다.
"""

from datetime import date, datetime, time, timedelta, timezone

from core.constants import Defaults


def make_timezone(offset_minutes: int = Defaults.UTC_OFFSET_MINUTES) -> timezone:
    """UTC 오프셋(분)으로 고정 타임존 생성

    Example:
        >>> make_timezone(330)
        datetime.timezone(datetime.timedelta(seconds=19800))
    """
    return timezone(timedelta(minutes=offset_minutes))


# 기본 로컬 타임존 (UTC+05:30)
LOCAL_TZ = make_timezone()


def now_utc() -> datetime:
    """현재 UTC 시간 반환 (타임존 명시)"""
    return datetime.now(timezone.utc)


def to_local(dt: datetime, tz: timezone = LOCAL_TZ) -> datetime:
    """datetime을 로컬 타임존으로 변환

    Args:
        dt: datetime 객체 (naive면 로컬 시간으로 간주)
        tz: 로컬 타임존

    Returns:
        로컬 타임존의 datetime
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def start_of_day(day: date, tz: timezone = LOCAL_TZ) -> datetime:
    """로컬 하루의 시작 (00:00:00.000)"""
    return datetime.combine(day, time.min, tzinfo=tz)


def end_of_day(day: date, tz: timezone = LOCAL_TZ) -> datetime:
    """로컬 하루의 끝 (23:59:59.999)

    밀리초 단위 경계. 999ms 이후의 마이크로초는 다음 경계로 취급하지 않는다.
    """
    return datetime.combine(day, time(23, 59, 59, 999000), tzinfo=tz)


def parse_datetime(value: datetime | date | str, tz: timezone = LOCAL_TZ) -> datetime:
    """날짜/시간 값을 타임존 포함 datetime으로 변환

    허용 형식:
        - datetime (naive면 로컬)
        - date (로컬 00:00)
        - ISO-8601 문자열 ("2026-10-19", "2026-10-19T10:30:00", "...+05:30", "...Z")

    Raises:
        ValueError: 해석할 수 없는 문자열
    """
    if isinstance(value, datetime):
        return to_local(value, tz)
    if isinstance(value, date):
        return start_of_day(value, tz)

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    if len(text) == 10:
        return start_of_day(date.fromisoformat(text), tz)
    return to_local(datetime.fromisoformat(text), tz)


def parse_date(value: date | datetime | str, tz: timezone = LOCAL_TZ) -> date:
    """로컬 달력 날짜로 변환

    datetime은 로컬 타임존으로 변환 후 날짜 부분을 취한다.
    """
    if isinstance(value, datetime):
        return to_local(value, tz).date()
    if isinstance(value, date):
        return value
    return parse_datetime(value, tz).date()


def format_iso(dt: datetime) -> str:
    """datetime을 밀리초 정밀도 ISO-8601 문자열로 포맷

    Example:
        >>> format_iso(datetime(2026, 10, 19, 9, 30, tzinfo=LOCAL_TZ))
        '2026-10-19T09:30:00.000+05:30'
    """
    return dt.isoformat(timespec="milliseconds")
