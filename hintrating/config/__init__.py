# hintrating/config/__init__.py
from __future__ import annotations

from .loader import load_config, rating_config_from, snapshot_and_fingerprint
from .schema import AppConfig, RatingConfig
