"""Bearer token authentication (identity boundary).

Tokens are issued elsewhere; here they are only verified and turned into an
Actor. Expected claims: ``sub`` (user UUID) and ``role`` (musician|organizer).
"""

import logging

from django.conf import settings
from jose import JWTError, jwt
from rest_framework import authentication, exceptions
from rest_framework.request import Request

from offers.domain import Actor, Role, UserId

logger = logging.getLogger(__name__)


class AuthenticatedActor:
    """Request principal wrapping the domain Actor."""

    is_authenticated = True
    is_anonymous = False

    def __init__(self, actor: Actor) -> None:
        self.actor = actor

    @property
    def pk(self) -> str:
        return str(self.actor.user_id)

    def __str__(self) -> str:
        return f"{self.actor.role.value}:{self.actor.user_id}"


def decode_actor(token: str) -> Actor:
    """Verify a token and return the actor it identifies.

    Raises:
        AuthenticationFailed: If the token is invalid, expired or incomplete.
    """
    try:
        claims = jwt.decode(
            token,
            settings.AUTH_TOKEN_SECRET,
            algorithms=[settings.AUTH_TOKEN_ALGORITHM],
        )
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        raise exceptions.AuthenticationFailed("Invalid or expired token")

    try:
        user_id = UserId.from_string(str(claims["sub"]))
        role = Role(claims["role"])
    except (KeyError, ValueError):
        raise exceptions.AuthenticationFailed("Token is missing a valid subject or role")
    return Actor(user_id=user_id, role=role)


class BearerTokenAuthentication(authentication.BaseAuthentication):
    keyword = "Bearer"

    def authenticate(self, request: Request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None
        if len(header) != 2:
            raise exceptions.AuthenticationFailed("Invalid Authorization header")
        try:
            token = header[1].decode()
        except UnicodeError:
            raise exceptions.AuthenticationFailed("Invalid Authorization header")
        actor = decode_actor(token)
        return AuthenticatedActor(actor), token

    def authenticate_header(self, request: Request) -> str:
        return self.keyword
