"""
유틸리티 패키지

거래 번호 생성, 타임존 처리 등 공통 유틸리티
"""

from core.utils.numbering import (
    format_transaction_number,
    parse_transaction_number,
)
from core.utils.timezone import (
    LOCAL_TZ,
    end_of_day,
    format_iso,
    make_timezone,
    now_utc,
    parse_date,
    parse_datetime,
    start_of_day,
    to_local,
)

__all__ = [
    "format_transaction_number",
    "parse_transaction_number",
    "LOCAL_TZ",
    "end_of_day",
    "format_iso",
    "make_timezone",
    "now_utc",
    "parse_date",
    "parse_datetime",
    "start_of_day",
    "to_local",
]
