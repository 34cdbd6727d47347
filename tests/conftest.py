import pytest
from flask_jwt_extended import create_access_token, create_refresh_token

from siteforge import create_app
from siteforge.application.auth.login import stage_user
from siteforge.constants import SUPER_ADMIN, TENANT_ADMIN, TENANT_USER
from siteforge.extensions import db
from siteforge.models.tenant import KNOWN_FEATURES, Tenant
from siteforge.models.user import UserTenant
from siteforge.utils.transaction import transactional

PASSWORDS = {
    "root": "root-pw",
    "admin": "admin-pw",
    "member": "member-pw",
    "outsider": "outsider-pw",
}


class Seeded:
    """Ids and tokens of the fixture tenant and its users."""

    def __init__(self, tenant_id, tenant_slug, user_ids, tokens, refresh_tokens):
        self.tenant_id = tenant_id
        self.tenant_slug = tenant_slug
        self.user_ids = user_ids
        self.tokens = tokens
        self.refresh_tokens = refresh_tokens

    def headers(self, who="admin", tenant=True):
        headers = {}
        if who:
            headers["Authorization"] = f"Bearer {self.tokens[who]}"
        if tenant:
            headers["X-Tenant-ID"] = self.tenant_id
        return headers


@pytest.fixture()
def app(tmp_path, monkeypatch):
    monkeypatch.setenv("STORAGE_BACKEND", "local")
    for k in ("S3_ENDPOINT", "S3_REGION", "S3_BUCKET", "S3_ACCESS_KEY_ID", "S3_SECRET_ACCESS_KEY"):
        monkeypatch.delenv(k, raising=False)

    app = create_app("testing")
    app.config.update(UPLOAD_FOLDER=str(tmp_path / "uploads"))

    with app.app_context():
        db.create_all()

    yield app

    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def seed(app):
    with app.app_context():
        with transactional():
            tenant = Tenant(
                name="Acme",
                slug="acme",
                status="ACTIVE",
                features=list(KNOWN_FEATURES),
                settings={},
            )
            db.session.add(tenant)
            db.session.flush()

            users = {
                "root": stage_user(email="root@example.com", password=PASSWORDS["root"], role_name=SUPER_ADMIN),
                "admin": stage_user(email="admin@acme.test", password=PASSWORDS["admin"], role_name=TENANT_ADMIN),
                "member": stage_user(email="member@acme.test", password=PASSWORDS["member"]),
                "outsider": stage_user(email="outsider@example.com", password=PASSWORDS["outsider"]),
            }
            db.session.add_all([
                UserTenant(user_id=users["admin"].id, tenant_id=tenant.id, role=TENANT_ADMIN),
                UserTenant(user_id=users["member"].id, tenant_id=tenant.id, role=TENANT_USER),
            ])

        user_ids = {name: user.id for name, user in users.items()}
        return Seeded(
            tenant_id=tenant.id,
            tenant_slug=tenant.slug,
            user_ids=user_ids,
            tokens={name: create_access_token(identity=uid) for name, uid in user_ids.items()},
            refresh_tokens={name: create_refresh_token(identity=uid) for name, uid in user_ids.items()},
        )
