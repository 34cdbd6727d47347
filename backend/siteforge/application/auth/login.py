import logging

from flask_jwt_extended import create_access_token

from siteforge.errors import Conflict, Forbidden, NotAuthenticated, ValidationError
from siteforge.extensions import db
from siteforge.models.user import User
from siteforge.application.users.roles import get_or_create_role
from siteforge.constants import SUPER_ADMIN, TENANT_USER
from siteforge.utils.transaction import transactional
from .tokens import issue_tokens, token_claims

logger = logging.getLogger(__name__)


def login(*, email, password, tenant=None):
    """
    Verify credentials and issue tokens. With a tenant, the user must be an
    active member of it and the tokens carry the membership role.
    """
    if not email or not password:
        raise ValidationError("Email and password required")

    user = User.query.filter_by(email=email.strip().lower()).first()

    if not user or not user.check_password(password):
        logger.info("Failed login for %s", email)
        raise NotAuthenticated("Invalid credentials")

    if not user.is_active:
        raise Forbidden("User account disabled")

    membership = None
    if tenant is not None:
        membership = user.membership_for(tenant.id)
        if (membership is None or not membership.is_active) and user.role_name != SUPER_ADMIN:
            raise Forbidden("Unauthorized: You are not a member of this tenant")

    tokens = issue_tokens(user, membership)
    tokens["user"] = user
    return tokens


def stage_user(*, email, password, first_name=None, last_name=None, phone_number=None, role_name=TENANT_USER):
    """
    Validate and add a new user to the session without committing, so callers
    can bundle it with other writes.
    """
    if not email or not password:
        raise ValidationError("Email and password required")

    email = email.strip().lower()
    if User.query.filter_by(email=email).first():
        raise Conflict(f"A user with email {email} already exists")

    user = User(
        email=email,
        first_name=first_name,
        last_name=last_name,
        phone_number=phone_number,
    )
    user.set_password(password)
    user.role = get_or_create_role(role_name)
    db.session.add(user)
    db.session.flush()
    return user


def register(*, email, password, first_name=None, last_name=None, phone_number=None):
    with transactional():
        user = stage_user(
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            phone_number=phone_number,
        )

    logger.info("Registered user %s", user.id)
    return user


def refresh(user):
    if not user.is_active:
        raise Forbidden("User account disabled")
    return create_access_token(identity=user.id, additional_claims=token_claims(user))
