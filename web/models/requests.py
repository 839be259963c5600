"""
요청 스키마 (Pydantic)

Web API 요청 데이터 검증.
거래 요청은 type 필드 기준 태그 유니온: transfer만 transfer_to_account_id를 가진다.
"""

from datetime import timezone
from decimal import Decimal
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, RootModel, field_validator

from core.ledger.models import ExpenseInput, IncomeInput, TransactionInput, TransferInput
from core.utils.timezone import LOCAL_TZ, parse_datetime


class _TransactionRequestBase(BaseModel):
    """거래 요청 공통 필드"""

    name: str = Field(..., min_length=1, max_length=200, description="거래명")
    description: str | None = Field(default=None, max_length=1000, description="설명")
    category: str | None = Field(default=None, max_length=100, description="카테고리")
    amount: Decimal = Field(..., gt=0, description="금액 (문자열 권장)")
    account_id: str = Field(..., min_length=1, description="출발 계정 ID")
    transaction_date: str = Field(
        ...,
        description="거래일 (ISO-8601, 타임존 없으면 로컬 시간)",
    )

    model_config = {"extra": "forbid"}

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("amount")
    @classmethod
    def _finite_amount(cls, v: Decimal) -> Decimal:
        if not v.is_finite():
            raise ValueError("amount must be finite")
        return v

    @field_validator("transaction_date")
    @classmethod
    def _valid_date(cls, v: str) -> str:
        parse_datetime(v)
        return v

    def _common(self, tz: timezone) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "category": self.category,
            "amount": self.amount,
            "account_id": self.account_id,
            "transaction_date": parse_datetime(self.transaction_date, tz),
        }


class IncomeRequest(_TransactionRequestBase):
    """수입 요청"""

    type: Literal["income"]

    def to_input(self, tz: timezone = LOCAL_TZ) -> TransactionInput:
        return IncomeInput(**self._common(tz))


class ExpenseRequest(_TransactionRequestBase):
    """지출 요청"""

    type: Literal["expense"]

    def to_input(self, tz: timezone = LOCAL_TZ) -> TransactionInput:
        return ExpenseInput(**self._common(tz))


class TransferRequest(_TransactionRequestBase):
    """이체 요청"""

    type: Literal["transfer"]
    transfer_to_account_id: str = Field(..., min_length=1, description="도착 계정 ID")

    def to_input(self, tz: timezone = LOCAL_TZ) -> TransactionInput:
        return TransferInput(to_account_id=self.transfer_to_account_id, **self._common(tz))


class TransactionRequest(
    RootModel[
        Annotated[
            Union[IncomeRequest, ExpenseRequest, TransferRequest],
            Field(discriminator="type"),
        ]
    ]
):
    """거래 요청 (type 기준 income / expense / transfer 분기)"""

    def to_input(self, tz: timezone = LOCAL_TZ) -> TransactionInput:
        return self.root.to_input(tz)
