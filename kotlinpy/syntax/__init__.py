"""Syntax kinds."""

from kotlinpy.syntax.kind import KotlinSyntaxKind

__all__ = ["KotlinSyntaxKind"]
