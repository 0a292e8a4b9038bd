# hintrating/tree/__init__.py
from __future__ import annotations

from .ast_node import EMPTY_TYPE, ASTNode
from .diff import ColorStyle, diff

__all__ = ["ASTNode", "EMPTY_TYPE", "ColorStyle", "diff"]
