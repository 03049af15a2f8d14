"""
Utility functions for stockbook.

This module provides utilities for working with workbooks:
- logging: Package logger helpers
- visualization: Text grid rendering of sheets
- serialization: JSON snapshot serialization/deserialization of workbooks
"""

from .logging import configure_logging, get_logger
from .visualization import render_sheet
from .serialization import (
    serialize,
    deserialize,
    to_json,
    from_json,
    SERIALIZATION_VERSION
)

__all__ = [
    'configure_logging',
    'get_logger',
    'render_sheet',
    'serialize',
    'deserialize',
    'to_json',
    'from_json',
    'SERIALIZATION_VERSION'
]
