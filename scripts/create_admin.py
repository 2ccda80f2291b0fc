import getpass
import os
import sys

# Add parent dir to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from userhub.config import get_settings
from userhub.application.services.auth_service import PasswordHasher
from userhub.application.services.user_service import UserService
from userhub.infrastructure.database import Base, build_engine, build_session_factory
from userhub.infrastructure.image_store import ImageStore
from userhub.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


def create_admin():
    settings = get_settings()

    name = input("Name [Admin]: ").strip() or "Admin"
    email = input("Email: ").strip()
    password = getpass.getpass("Password: ")
    if not email or not password:
        print("Email and password are required.")
        sys.exit(1)

    engine = build_engine(settings.DATABASE_URL)
    Base.metadata.create_all(bind=engine)
    db = build_session_factory(engine)()
    try:
        service = UserService(
            SQLAlchemyUserRepository(db),
            PasswordHasher(rounds=settings.BCRYPT_ROUNDS),
            ImageStore(settings.UPLOAD_DIR, settings.UPLOAD_URL_PREFIX, settings.ALLOWED_IMAGE_EXTENSIONS),
        )
        user = service.create_admin(name, email, password)
        if user is None:
            print(f"{email} is already registered.")
        else:
            print(f"Admin {email} created (id {user.id}).")
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    try:
        create_admin()
    except KeyboardInterrupt:
        print("\nCancelled.")
