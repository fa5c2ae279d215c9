import logging

from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import APIView

from shop.serializers import LoginSerializer, RegisterSerializer, UserSerializer
from shop.services import AccountService

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    """
    POST /api/auth/register - Create a user account.

    Request body: {"name", "username", "email", "password"}
    """

    authentication_classes = ()
    failure_message = "Registration failed"

    def post(self, request, *args, **kwargs):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        token, user = AccountService.register(**serializer.validated_data)

        return Response(
            {"token": token, "user": UserSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


class LoginView(APIView):
    """POST /api/auth/login - Exchange credentials for a bearer token."""

    authentication_classes = ()
    failure_message = "Login failed"

    def post(self, request, *args, **kwargs):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        token, user = AccountService.login(**serializer.validated_data)

        return Response({"token": token, "user": UserSerializer(user).data})
