"""
publishing/ — Todo lo relacionado con publicar un borrador.

Módulos:
- artifacts.py → Colecciones del blog, encontrar y mover artefactos por slug
- git_ops.py   → Operaciones Git (mv, add, commit -F, push)
- metadata.py  → Lectura y validación de descriptores YAML
- publisher.py → El flujo completo: verificar, mover, commitear
"""
