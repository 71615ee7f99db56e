"""
Bearer JWT authentication for the marketplace API.

Kept in its own module so settings can reference a stable import path
without pulling in views.  On top of simplejwt's checks, requests from
accounts that are currently locked out are refused.
"""
from __future__ import annotations

from rest_framework import exceptions
from rest_framework_simplejwt.authentication import JWTAuthentication
from rest_framework_simplejwt.tokens import RefreshToken


class BearerJWTAuthentication(JWTAuthentication):
    """``Authorization: Bearer <access>`` authentication."""

    def get_user(self, validated_token):
        user = super().get_user(validated_token)
        if user.is_account_locked():
            raise exceptions.AuthenticationFailed('Account is temporarily locked', code='account_locked')
        return user


def issue_tokens(user) -> RefreshToken:
    """Return a refresh token for ``user``; its access token carries the role claim."""
    refresh = RefreshToken.for_user(user)
    refresh['role'] = user.role
    refresh['email'] = user.email
    return refresh
