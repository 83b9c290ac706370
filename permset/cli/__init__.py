"""
Permset CLI Package
====================
Command-line interface for permset.
"""

from .main import app, main_entry
from .demo import run_demo

__all__ = [
    'app',
    'main_entry',
    'run_demo',
]
