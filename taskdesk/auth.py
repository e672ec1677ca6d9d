import logging
import jwt
from fastapi import HTTPException, Request
from taskdesk import config

log = logging.getLogger(__name__)


class CredentialChecker:
    """Turns a bearer token (or None) into claims, or raises a 401."""

    def check(self, token: str | None) -> dict:
        raise NotImplementedError


class AllowAllChecker(CredentialChecker):
    def check(self, token: str | None) -> dict:
        return {}


class JWTChecker(CredentialChecker):
    def __init__(self, secret: str, audience: str | None = None, algorithms: list[str] | None = None):
        self.secret = secret
        self.audience = audience
        self.algorithms = algorithms or config.JWT_ALGORITHMS

    def check(self, token: str | None) -> dict:
        if not token:
            raise HTTPException(status_code=401, detail="Missing bearer token")
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=self.algorithms,
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except jwt.ExpiredSignatureError:
            log.warning("Rejected expired token")
            raise HTTPException(status_code=401, detail="Token expired")
        except jwt.InvalidTokenError as e:
            log.warning("Rejected token: %s", e)
            raise HTTPException(status_code=401, detail=f"Invalid token: {e}")


def default_checker() -> CredentialChecker:
    if config.JWT_SECRET:
        return JWTChecker(config.JWT_SECRET, audience=config.JWT_AUDIENCE)
    return AllowAllChecker()


def _get_bearer_token(request: Request) -> str | None:
    auth = request.headers.get("Authorization", "")
    if not auth.startswith("Bearer "):
        return None
    return auth.split(" ", 1)[1].strip()


def require_credentials(request: Request) -> dict:
    """Route dependency; the checker lives on app.state so tests can swap it."""
    checker: CredentialChecker = request.app.state.credential_checker
    return checker.check(_get_bearer_token(request))
