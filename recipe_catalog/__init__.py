"""
recipe_catalog: núcleo del catálogo de recetas (servicios, modelos y reglas).
"""

__version__ = "0.1.0"
