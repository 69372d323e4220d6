"""Code formatters for export."""

from .code_formatter import CodeFormatter

__all__ = ["CodeFormatter"]
