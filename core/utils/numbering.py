"""
거래 번호 유틸리티

사람이 읽을 수 있는 거래 번호 생성 및 파싱
규칙: TXN-{seq:06d}
"""

from core.constants import Defaults


def format_transaction_number(
    seq: int,
    prefix: str = Defaults.TRANSACTION_NUMBER_PREFIX,
    width: int = Defaults.TRANSACTION_NUMBER_WIDTH,
) -> str:
    """순번으로 거래 번호 생성

    Args:
        seq: 1부터 시작하는 발번 순번
        prefix: 접두사
        width: 0 채움 자릿수 (초과 시 그대로 늘어남)

    Returns:
        거래 번호

    Example:
        >>> format_transaction_number(42)
        'TXN-000042'
    """
    if seq < 1:
        raise ValueError(f"순번은 1 이상이어야 합니다: {seq}")

    return f"{prefix}-{seq:0{width}d}"


def parse_transaction_number(
    transaction_number: str,
    prefix: str = Defaults.TRANSACTION_NUMBER_PREFIX,
) -> int | None:
    """거래 번호에서 순번 추출

    Example:
        >>> parse_transaction_number("TXN-000042")
        42
        >>> parse_transaction_number("INV-42")
        None
    """
    if not transaction_number:
        return None

    head = f"{prefix}-"
    if not transaction_number.startswith(head):
        return None

    digits = transaction_number[len(head):]
    if not digits.isdigit():
        return None

    return int(digits)
