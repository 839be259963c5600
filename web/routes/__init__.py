"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- accounts: 계정 잔액 / 잔액 검증
- transactions: 거래 생성/수정/삭제/목록
- categories: 카테고리 목록
"""
