"""Emite un JWT de administrador firmado con la clave de la configuración.

Uso: python scripts/emitir_token_admin.py <uid> [email]
"""
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from app.core.security import create_access_token


def main():
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(1)
    uid = sys.argv[1]
    extra = {"email": sys.argv[2]} if len(sys.argv) > 2 else None
    print(create_access_token(subject=uid, extra=extra))


if __name__ == "__main__":
    main()
