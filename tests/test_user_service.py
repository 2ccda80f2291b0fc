import io

import pytest
from fastapi import UploadFile

from userhub.application.services.auth_service import PasswordHasher
from userhub.application.services.user_service import UserService, ensure_can_view
from userhub.core.exceptions import ConflictException, ForbiddenException, InternalError
from userhub.domain.schemas.auth import TokenPayload
from userhub.domain.schemas.user import UserRegister, UserUpdate
from userhub.infrastructure.database import Base, build_engine, build_session_factory
from userhub.infrastructure.image_store import ImageStore
from userhub.infrastructure.repositories.user_repository import SQLAlchemyUserRepository


@pytest.fixture
def service(tmp_path):
    engine = build_engine("sqlite://")
    Base.metadata.create_all(bind=engine)
    db = build_session_factory(engine)()
    yield UserService(SQLAlchemyUserRepository(db), PasswordHasher(rounds=4), ImageStore(str(tmp_path)))
    db.close()
    engine.dispose()


def upload(filename="avatar.png"):
    return UploadFile(file=io.BytesIO(b"img"), filename=filename)


def registration(**fields):
    data = {"name": "Jane", "email": "jane@example.com", "password": "secret-1"}
    data.update(fields)
    return UserRegister(**data)


def test_register_stores_hash_not_plaintext(service):
    user = service.register(registration())
    assert user.password_hash != "secret-1"
    assert service.hasher.verify("secret-1", user.password_hash)


def test_register_ignores_empty_file_part(service):
    user = service.register(registration(), UploadFile(file=io.BytesIO(b""), filename=""))
    assert user.profile_image is None


def test_register_discards_image_when_insert_fails(service, monkeypatch):
    def failing_create(data):
        raise InternalError()

    monkeypatch.setattr(service.repo, "create", failing_create)
    with pytest.raises(InternalError):
        service.register(registration(), upload())
    assert list(service.images.directory.iterdir()) == []


def test_register_conflict_checked_before_image_saved(service):
    service.register(registration())
    with pytest.raises(ConflictException):
        service.register(registration(name="Other"), upload())
    assert list(service.images.directory.iterdir()) == []


def test_update_reports_stale_image(service):
    user = service.register(registration(), upload())
    first = user.profile_image

    updated, stale = service.update_user(user.id, UserUpdate(), upload("next.jpg"))
    assert stale == first
    assert updated.profile_image != first
    # the service leaves stale files for the caller's cleanup task
    assert service.images.path_for(first).is_file()


def test_update_without_image_reports_nothing_stale(service):
    user = service.register(registration(), upload())
    _, stale = service.update_user(user.id, UserUpdate(city="Pune"))
    assert stale is None


def test_update_never_touches_unsent_fields(service):
    user = service.register(registration(city="Pune", phone="123"))
    updated, _ = service.update_user(user.id, UserUpdate(phone="456"))
    assert updated.city == "Pune"
    assert updated.phone == "456"
    assert updated.role == "user"


def test_create_admin_is_idempotent(service):
    assert service.create_admin("Admin", "admin@example.com", "pw").role == "admin"
    assert service.create_admin("Admin", "admin@example.com", "pw") is None


def test_ensure_can_view():
    ensure_can_view(TokenPayload(id="a", role="user"), "a")
    ensure_can_view(TokenPayload(id="a", role="admin"), "b")
    with pytest.raises(ForbiddenException):
        ensure_can_view(TokenPayload(id="a", role="user"), "b")
