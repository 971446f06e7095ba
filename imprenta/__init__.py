"""
Imprenta — Publica borradores de un blog versionado con Git.

Este paquete contiene todo el código de la herramienta:
- publishing/  → Mover borradores a publicados y hacer commit
- utils/       → Utilidades compartidas (logging, validación)

Uso:
    publish mi-slug
    python -m imprenta publish mi-slug
    python -m imprenta drafts
    python -m imprenta health
"""

__version__ = "1.0.0"
