from urllib.parse import parse_qs

from channels.db import database_sync_to_async
from channels.middleware import BaseMiddleware
from django.contrib.auth.models import AnonymousUser
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.exceptions import InvalidToken, TokenError

from .authentication import BearerJWTAuthentication


@database_sync_to_async
def _user_for_token(raw: str):
    auth = BearerJWTAuthentication()
    try:
        validated = auth.get_validated_token(raw)
        return auth.get_user(validated)
    except (InvalidToken, TokenError, AuthenticationFailed):
        return AnonymousUser()


class JWTQueryAuthMiddleware(BaseMiddleware):
    """Authenticate WebSocket connections from ``?token=<access>``.

    Browsers cannot set an Authorization header on a WebSocket handshake,
    so the access token travels in the query string instead.
    """

    async def __call__(self, scope, receive, send):
        params = parse_qs(scope.get("query_string", b"").decode())
        token = (params.get("token") or [None])[0]
        scope["user"] = await _user_for_token(token) if token else AnonymousUser()
        return await super().__call__(scope, receive, send)
