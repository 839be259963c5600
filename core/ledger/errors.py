"""
원장 오류 정의

모든 오류는 LedgerError를 상속한다.
오류가 발생한 작업은 상태를 전혀 바꾸지 않는다 (검증 실패는 변경 전,
계정 누락은 트랜잭션 롤백).
"""


class LedgerError(Exception):
    """원장 오류 기본 클래스

    Attributes:
        code: API 응답용 오류 코드
    """

    code: str = "ledger_error"


class ValidationError(LedgerError):
    """거래 입력 검증 실패

    금액 <= 0, 최소 단위 초과, 이체 계정 누락/동일, 존재하지 않는 계정 참조.
    """

    code = "validation_error"


class TransactionNotFoundError(LedgerError):
    """존재하지 않는 거래 ID"""

    code = "transaction_not_found"

    def __init__(self, transaction_id: str):
        super().__init__(f"Transaction not found: {transaction_id}")
        self.transaction_id = transaction_id


class AccountNotFoundError(LedgerError):
    """존재하지 않는 계정 ID

    apply_delta 중 발생하면 해당 원장 작업 전체를 중단하고 롤백한다.
    """

    code = "account_not_found"

    def __init__(self, account_id: str):
        super().__init__(f"Account not found: {account_id}")
        self.account_id = account_id


class LedgerBusyError(LedgerError):
    """쓰기 락 대기 시간 초과"""

    code = "ledger_busy"
