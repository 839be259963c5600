"""
원장 도메인 모델

거래 입력은 유형별 태그 변형(IncomeInput | ExpenseInput | TransferInput)으로
표현한다. 도착 계정은 TransferInput에만 존재한다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any, ClassVar, Union

from core.types import AccountType, EntryKind, LedgerOperation, TransactionType
from core.utils.timezone import format_iso


@dataclass(frozen=True)
class Account:
    """현금 계정

    balance는 AccountStore만 변경한다.
    """

    account_id: str
    name: str
    account_type: AccountType
    balance: Decimal
    updated_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "account_id": self.account_id,
            "name": self.name,
            "account_type": self.account_type.value,
            "balance": str(self.balance),
            "updated_at": self.updated_at,
        }


@dataclass(frozen=True, kw_only=True)
class _TransactionFields:
    """모든 거래 유형의 공통 필드"""

    transaction_type: ClassVar[TransactionType]

    name: str
    amount: Decimal
    account_id: str
    transaction_date: datetime
    description: str | None = None
    category: str | None = None

    @property
    def transfer_to_account_id(self) -> str | None:
        return None

    def account_ids(self) -> tuple[str, ...]:
        """참조하는 계정 ID 목록 (출발 계정 먼저)"""
        return (self.account_id,)


@dataclass(frozen=True, kw_only=True)
class IncomeInput(_TransactionFields):
    """수입: 출발 계정 잔액 증가"""

    transaction_type: ClassVar[TransactionType] = TransactionType.INCOME


@dataclass(frozen=True, kw_only=True)
class ExpenseInput(_TransactionFields):
    """지출: 출발 계정 잔액 감소"""

    transaction_type: ClassVar[TransactionType] = TransactionType.EXPENSE


@dataclass(frozen=True, kw_only=True)
class TransferInput(_TransactionFields):
    """이체: 출발 계정 감소, 도착 계정 증가"""

    transaction_type: ClassVar[TransactionType] = TransactionType.TRANSFER

    to_account_id: str

    @property
    def transfer_to_account_id(self) -> str | None:
        return self.to_account_id

    def account_ids(self) -> tuple[str, ...]:
        return (self.account_id, self.to_account_id)


TransactionInput = Union[IncomeInput, ExpenseInput, TransferInput]

_INPUT_TYPES: dict[TransactionType, type] = {
    TransactionType.INCOME: IncomeInput,
    TransactionType.EXPENSE: ExpenseInput,
    TransactionType.TRANSFER: TransferInput,
}


def build_input(
    transaction_type: TransactionType | str,
    *,
    name: str,
    amount: Decimal,
    account_id: str,
    transaction_date: datetime,
    description: str | None = None,
    category: str | None = None,
    transfer_to_account_id: str | None = None,
) -> TransactionInput:
    """평평한 필드로부터 유형별 입력 생성

    Raises:
        ValueError: 알 수 없는 유형, 이체에 도착 계정 누락, 비이체에 도착 계정 지정
    """
    transaction_type = TransactionType(transaction_type)
    common: dict[str, Any] = {
        "name": name,
        "amount": amount,
        "account_id": account_id,
        "transaction_date": transaction_date,
        "description": description,
        "category": category,
    }

    if transaction_type == TransactionType.TRANSFER:
        if not transfer_to_account_id:
            raise ValueError("transfer requires transfer_to_account_id")
        return TransferInput(to_account_id=transfer_to_account_id, **common)

    if transfer_to_account_id:
        raise ValueError(
            f"transfer_to_account_id is only allowed for transfers, got {transaction_type.value}"
        )
    return _INPUT_TYPES[transaction_type](**common)


@dataclass(frozen=True)
class Effect:
    """거래가 한 계정에 주는 부호 있는 잔액 변화"""

    account_id: str
    delta: Decimal


@dataclass(frozen=True)
class CashTransaction:
    """저장된 거래

    수정 시 transaction_id, transaction_number, created_at, seq는 유지되고
    details만 교체된다.
    """

    transaction_id: str
    transaction_number: str
    details: TransactionInput
    created_at: datetime
    updated_at: datetime | None = None
    seq: int = 0  # 삽입 순서 (정렬 동률 처리용)

    @property
    def transaction_type(self) -> TransactionType:
        return self.details.transaction_type

    @property
    def name(self) -> str:
        return self.details.name

    @property
    def description(self) -> str | None:
        return self.details.description

    @property
    def category(self) -> str | None:
        return self.details.category

    @property
    def amount(self) -> Decimal:
        return self.details.amount

    @property
    def account_id(self) -> str:
        return self.details.account_id

    @property
    def transfer_to_account_id(self) -> str | None:
        return self.details.transfer_to_account_id

    @property
    def transaction_date(self) -> datetime:
        return self.details.transaction_date

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.transaction_id,
            "transaction_number": self.transaction_number,
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "type": self.transaction_type.value,
            "amount": str(self.amount),
            "account_id": self.account_id,
            "transfer_to_account_id": self.transfer_to_account_id,
            "transaction_date": format_iso(self.transaction_date),
            "created_at": format_iso(self.created_at),
            "updated_at": format_iso(self.updated_at) if self.updated_at else None,
        }


@dataclass(frozen=True)
class EntryRef:
    """분개 출처 정보 (apply_delta 호출자가 전달)"""

    operation: LedgerOperation
    kind: EntryKind
    ts: datetime
    transaction_id: str | None = None
    transaction_number: str | None = None


@dataclass(frozen=True)
class LedgerEntry:
    """분개 (추가 전용 기록)

    하나의 계정에 적용된 하나의 잔액 변화. 수정/삭제되지 않는다.
    """

    seq: int
    entry_id: str
    account_id: str
    delta: Decimal
    operation: LedgerOperation
    kind: EntryKind
    ts: str
    transaction_id: str | None = None
    transaction_number: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "seq": self.seq,
            "entry_id": self.entry_id,
            "transaction_id": self.transaction_id,
            "transaction_number": self.transaction_number,
            "operation": self.operation.value,
            "kind": self.kind.value,
            "account_id": self.account_id,
            "delta": str(self.delta),
            "ts": self.ts,
        }


@dataclass(frozen=True)
class BalanceDrift:
    """저장된 잔액과 분개 합계의 불일치"""

    account_id: str
    stored: Decimal
    expected: Decimal

    @property
    def difference(self) -> Decimal:
        return self.stored - self.expected


@dataclass(frozen=True)
class LedgerSnapshot:
    """한 시점의 계정/거래 전체 (같은 락 구간에서 읽음)"""

    accounts: list[Account] = field(default_factory=list)
    transactions: list[CashTransaction] = field(default_factory=list)
