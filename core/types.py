"""
타입 정의 모듈

현금 원장에서 사용하는 핵심 Enum 정의
모든 Enum은 str을 상속하여 문자열 직렬화 가능
"""

from enum import Enum


class AccountType(str, Enum):
    """현금 계정 유형"""

    DRAWER = "drawer"  # 계산대 서랍
    CASH_IN_HAND = "cash_in_hand"  # 보유 현금
    BUSINESS = "business"  # 사업자 계좌
    OTHER = "other"


class TransactionType(str, Enum):
    """거래 유형

    transfer만 도착 계정(transfer_to_account_id)을 가진다.
    """

    INCOME = "income"
    EXPENSE = "expense"
    TRANSFER = "transfer"


class EffectRole(str, Enum):
    """거래가 계정에 작용하는 역할"""

    SOURCE = "source"  # 출발 계정 (account_id)
    DESTINATION = "destination"  # 도착 계정 (transfer_to_account_id)


class SortOrder(str, Enum):
    """거래일 정렬 방향"""

    ASC = "asc"
    DESC = "desc"


class LedgerOperation(str, Enum):
    """분개를 발생시킨 원장 작업"""

    OPENING = "OPENING"  # 기초 잔액
    CREATE = "CREATE"
    EDIT = "EDIT"
    DELETE = "DELETE"


class EntryKind(str, Enum):
    """분개 종류"""

    OPENING = "OPENING"
    APPLY = "APPLY"  # 효과 적용
    REVERSE = "REVERSE"  # 효과 취소 (부호 반전)
