"""
거래 효과 계산

(거래 유형, 역할) → 부호(+1/-1). 부호 × 금액이 계정 잔액 변화(delta).
적용과 취소는 같은 함수를 사용하고 취소는 단순 부호 반전이므로
apply 후 reverse는 항상 원래 잔액으로 돌아간다.
"""

from decimal import Decimal

from core.ledger.models import Effect, TransactionInput
from core.types import EffectRole, TransactionType


_SIGNS: dict[tuple[TransactionType, EffectRole], int] = {
    (TransactionType.INCOME, EffectRole.SOURCE): 1,
    (TransactionType.EXPENSE, EffectRole.SOURCE): -1,
    (TransactionType.TRANSFER, EffectRole.SOURCE): -1,
    (TransactionType.TRANSFER, EffectRole.DESTINATION): 1,
}


def effect_sign(transaction_type: TransactionType, role: EffectRole) -> int:
    """거래 유형과 역할의 부호

    Raises:
        ValueError: 정의되지 않은 조합 (예: income의 destination)
    """
    try:
        return _SIGNS[(TransactionType(transaction_type), EffectRole(role))]
    except KeyError:
        raise ValueError(
            f"No effect for {transaction_type} as {role}"
        ) from None


def effect(transaction_type: TransactionType, role: EffectRole, amount: Decimal) -> Decimal:
    """한 계정에 적용할 delta"""
    return effect_sign(transaction_type, role) * amount


def reverse(delta: Decimal) -> Decimal:
    """적용된 delta의 취소값"""
    return -delta


def compute_effects(details: TransactionInput) -> list[Effect]:
    """거래 입력의 계정별 효과

    이체는 출발/도착 두 개, 나머지는 출발 계정 하나.
    """
    transaction_type = details.transaction_type
    effects = [
        Effect(
            account_id=details.account_id,
            delta=effect(transaction_type, EffectRole.SOURCE, details.amount),
        )
    ]

    destination = details.transfer_to_account_id
    if destination is not None:
        effects.append(
            Effect(
                account_id=destination,
                delta=effect(transaction_type, EffectRole.DESTINATION, details.amount),
            )
        )

    return effects


def reverse_effects(effects: list[Effect]) -> list[Effect]:
    """효과 목록 전체 취소"""
    return [Effect(account_id=e.account_id, delta=reverse(e.delta)) for e in effects]
