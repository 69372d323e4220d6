"""Code generation templates."""

from .base import BaseTemplate
from .python_playwright import PythonPlaywrightTemplate
from .typescript_playwright import TypeScriptPlaywrightTemplate

__all__ = [
    "BaseTemplate",
    "PythonPlaywrightTemplate",
    "TypeScriptPlaywrightTemplate",
]
