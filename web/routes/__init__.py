"""
API 라우트 패키지

각 기능별 라우터 모듈:
- health: 헬스 체크
- statements: 재무상태표 / 손익계산서 / 시산표
- ledger: 계정과목 트리, 단일 Ledger 잔액
"""
