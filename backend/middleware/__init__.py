"""
Middleware package initialization
"""
from .field_alias import FieldAliasMiddleware, apply_field_aliases
from .request_logging import RequestLoggingMiddleware
from .exception_handlers import register_exception_handlers, status_for_kind

__all__ = [
    'FieldAliasMiddleware',
    'apply_field_aliases',
    'RequestLoggingMiddleware',
    'register_exception_handlers',
    'status_for_kind'
]
