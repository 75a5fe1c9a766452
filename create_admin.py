"""
Create a platform admin, or reset the password of an existing one

Usage: python create_admin.py <email> <password> [name]
"""
import sys

from app.core.database import SessionLocal, init_db
from app.core.security import hash_password
from app.models.admin import Admin

if len(sys.argv) < 3:
    print(__doc__)
    sys.exit(1)

email = sys.argv[1].strip()
new_password = sys.argv[2]
name = sys.argv[3] if len(sys.argv) > 3 else "Administrador"

print("=" * 60)
print("CREATING ADMIN")
print("=" * 60)

init_db()
db = SessionLocal()
try:
    admin = db.query(Admin).filter(Admin.email == email).first()
    if admin:
        admin.password_hash = hash_password(new_password)
        admin.is_active = True
        print(f"\nPassword updated for existing admin {email}")
    else:
        admin = Admin(name=name, email=email, password_hash=hash_password(new_password), is_active=True)
        db.add(admin)
        print(f"\nAdmin created: {email}")
    db.commit()
    print("\nYou can now login with:")
    print("POST /api/auth/admin/login")
except Exception as e:
    db.rollback()
    print(f"\nError: {e}")
    sys.exit(1)
finally:
    db.close()

print("=" * 60)
