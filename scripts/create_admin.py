"""
Script para crear el primer administrador

Uso:
    python -m scripts.create_admin admin@ipv.local secreto123
"""
import sys

from ipv.config.database import SessionLocal, init_db
from ipv.shared.database.models import User
from ipv.core.auth.service import AuthService

def create_admin(email: str, password: str) -> bool:
    """Crear un usuario admin; si el email existe lo promueve a admin"""
    init_db()
    db = SessionLocal()

    try:
        user = db.query(User).filter(User.email == email).first()
        if user:
            user.role = "admin"
            db.commit()
            print(f"✅ {email} ya existía, ahora es administrador")
            return True

        db.add(User(
            email=email,
            password_hash=AuthService.get_password_hash(password),
            role="admin",
            is_active=True
        ))
        db.commit()
        print(f"✅ Administrador creado: {email}")
        return True

    except Exception as e:
        print(f"❌ Error creando administrador: {e}")
        db.rollback()
        return False
    finally:
        db.close()

if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Uso: python -m scripts.create_admin <email> <password>")
        sys.exit(1)

    sys.exit(0 if create_admin(sys.argv[1], sys.argv[2]) else 1)
