"""
API HTTP para recipe-catalog.

Esta capa expone endpoints REST que usan los servicios del core
(recipe_catalog.services) para gestionar recetas y cocinas.

La API está diseñada para ser consumida por:
- UI web
- Clientes externos
- Scripts de automatización
"""
