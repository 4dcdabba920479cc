"""
Web 서비스 패키지

엔진 결과 → API 응답 변환
"""

from web.services.statement_service import StatementService

__all__ = [
    "StatementService",
]
