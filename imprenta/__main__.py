"""
__main__.py — Permite ejecutar Imprenta como módulo.

    python -m imprenta publish mi-slug
"""

from imprenta.cli import main

if __name__ == "__main__":
    main()
