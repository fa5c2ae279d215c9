import logging

from rest_framework import authentication, exceptions

from shop.models import User
from shop.tokens import InvalidToken, decode_token

logger = logging.getLogger(__name__)


class BearerTokenAuthentication(authentication.BaseAuthentication):
    """
    Authenticates `Authorization: Bearer <token>` headers.

    The user is loaded from the database on every request, so role changes
    apply to tokens issued before them.
    """

    keyword = "Bearer"
    failure_message = "Please authenticate"

    def authenticate(self, request):
        header = authentication.get_authorization_header(request).split()
        if not header or header[0].lower() != self.keyword.lower().encode():
            return None

        if len(header) != 2:
            raise exceptions.AuthenticationFailed(self.failure_message)

        try:
            token = header[1].decode()
            payload = decode_token(token)
        except (UnicodeError, InvalidToken) as exc:
            logger.info("Rejected bearer token: %s", exc)
            raise exceptions.AuthenticationFailed(self.failure_message)

        try:
            user = User.objects.get(pk=payload["userId"])
        except (User.DoesNotExist, ValueError, TypeError):
            logger.info("Bearer token for unknown user id=%s", payload["userId"])
            raise exceptions.AuthenticationFailed(self.failure_message)

        return user, token

    def authenticate_header(self, request):
        return self.keyword
