"""
Response serializers and error body helpers.
"""

from .response import error_body, serialize

__all__ = ['error_body', 'serialize']
