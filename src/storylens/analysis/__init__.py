"""Analysis module - cursor-position lexical context."""

from storylens.analysis.context import ContextAnalyzer, FileSyntax, LexicalContext

__all__ = ["ContextAnalyzer", "FileSyntax", "LexicalContext"]
