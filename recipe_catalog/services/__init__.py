"""
Servicios de aplicación del catálogo.
"""

from .cuisine_service import CuisineService
from .recipe_service import RecipeService

__all__ = ["CuisineService", "RecipeService"]
