"""Rutas de la API."""

from . import cuisines, recipes

__all__ = ["cuisines", "recipes"]
