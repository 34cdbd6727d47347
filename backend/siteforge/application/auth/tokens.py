from flask_jwt_extended import create_access_token, create_refresh_token


def token_claims(user, membership=None):
    claims = {"role": user.role_name, "email": user.email}
    if membership is not None:
        claims["tenant_id"] = membership.tenant_id
        claims["tenant_role"] = membership.role
    return claims


def issue_tokens(user, membership=None):
    claims = token_claims(user, membership)
    return {
        "access_token": create_access_token(identity=user.id, additional_claims=claims),
        "refresh_token": create_refresh_token(identity=user.id, additional_claims=claims),
    }
