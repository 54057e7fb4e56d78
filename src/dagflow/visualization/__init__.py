# src/dagflow/visualization/__init__.py
"""Camada de apresentação: renderização DOT de Runnables (somente leitura)."""

from .dot import render_dot

__all__ = ["render_dot"]
