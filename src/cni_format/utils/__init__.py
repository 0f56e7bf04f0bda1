"""Utility modules for cni_format.

Provides:
- logger: get_logger for namespaced logging
"""

from cni_format.utils.logger import get_logger

__all__ = ["get_logger"]
