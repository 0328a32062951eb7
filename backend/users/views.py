"""
API views for authentication and user management.

Thin views: validation lives in serializers, every rule in UserService.
"""

import logging

from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from core.mixins.principal_context import PrincipalContextMixin
from core.mixins.service_exception_handler import ServiceExceptionHandlerMixin

from .access_levels import AccessLevel
from .permissions import HasIdentityClaim, IsSystemAdmin
from .serializers import (RegisterSerializer, RoleUpdateSerializer,
                          UserSerializer, UserUpdateSerializer)
from .services import UserService

logger = logging.getLogger(__name__)


class UserViewSet(PrincipalContextMixin, ServiceExceptionHandlerMixin, viewsets.ViewSet):
    """
    THIN user ViewSet - register/me plus self-or-Admin profile CRUD.
    """

    permission_classes = [IsAuthenticated, HasIdentityClaim]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_service = UserService()

    def get_permissions(self):
        if self.action == "register":
            return [AllowAny()]
        return [IsAuthenticated(), HasIdentityClaim()]

    def list(self, request):
        principal = self.get_principal()
        users = self.handle_service_call(
            self.user_service.list_users,
            principal.user_id,
            principal.system_access_level,
        )
        return Response(UserSerializer(users, many=True).data)

    def retrieve(self, request, pk=None):
        principal = self.get_principal()
        user = self.handle_service_call(
            self.user_service.get_user,
            pk,
            principal.user_id,
            principal.system_access_level,
        )
        return Response(UserSerializer(user).data)

    def update(self, request, pk=None):
        return self._update(request, pk, partial=False)

    def partial_update(self, request, pk=None):
        return self._update(request, pk, partial=True)

    def destroy(self, request, pk=None):
        principal = self.get_principal()
        self.handle_service_call(
            self.user_service.delete_user,
            pk,
            principal.user_id,
            principal.system_access_level,
        )
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"])
    def register(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = self.handle_service_call(
            self.user_service.register_user, **serializer.validated_data
        )
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=["get"])
    def me(self, request):
        """Current user with the access level the token was issued with."""
        principal = self.get_principal()
        user = self.handle_service_call(
            self.user_service.get_user,
            principal.user_id,
            principal.user_id,
            principal.system_access_level,
        )

        level = principal.system_access_level
        data = UserSerializer(user).data
        data["access_level"] = (level if level is not None else AccessLevel.GUEST).label
        return Response(data)

    def _update(self, request, pk, partial):
        principal = self.get_principal()
        serializer = UserUpdateSerializer(data=request.data, partial=partial)
        serializer.is_valid(raise_exception=True)

        user = self.handle_service_call(
            self.user_service.update_user,
            pk,
            serializer.validated_data,
            principal.user_id,
            principal.system_access_level,
        )
        return Response(UserSerializer(user).data)


class UserRoleView(PrincipalContextMixin, ServiceExceptionHandlerMixin, APIView):
    """PUT system/users/{user_id}/role - change system access level (Admin only)."""

    permission_classes = [IsAuthenticated, IsSystemAdmin]

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.user_service = UserService()

    def put(self, request, user_id):
        principal = self.get_principal()
        serializer = RoleUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = self.handle_service_call(
            self.user_service.set_system_access_level,
            user_id,
            serializer.validated_data["access_level"],
            principal.user_id,
            principal.system_access_level,
        )
        return Response(UserSerializer(user).data)
