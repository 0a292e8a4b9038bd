# hintrating/core/logging/__init__.py
from __future__ import annotations

from .json_logger import JSONLogger
