"""Column types for on-chain quantities"""
from sqlalchemy import String
from sqlalchemy.types import TypeDecorator


class Wei(TypeDecorator):
    """Unbounded non-negative integer (uint256) stored as a decimal string.

    Native integer columns top out at 64 bits and SQLite has no exact
    decimal type, so values are kept as text and handed back as ``int``.
    """

    impl = String(78)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(int(value))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return int(value)
