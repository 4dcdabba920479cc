"""
Ledger DB 연결

쓰기 연결은 WAL 모드, Web 조회는 읽기 전용 연결.
"""

from adapters.db.sqlite_adapter import SQLiteAdapter, create_connection, get_db_path

__all__ = ["SQLiteAdapter", "create_connection", "get_db_path"]
