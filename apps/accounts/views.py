from rest_framework import status, generics
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from drf_spectacular.utils import extend_schema, OpenApiParameter, inline_serializer
from drf_spectacular.types import OpenApiTypes
from rest_framework import serializers

from .models import User
from .permissions import IsManagerRole, IsSuperAdminRole
from .serializers import (
    UserSerializer,
    RoleChangeSerializer,
    UserListQuerySerializer,
)
from .services import (
    change_user_role,
    list_users,
    UserNotFoundError,
    InvalidRoleError,
    InsufficientPermissionsError,
)


ErrorResponseSerializer = inline_serializer(
    name='AccountsErrorResponse',
    fields={'error': serializers.CharField()},
)


@extend_schema(
    responses={200: UserSerializer},
    description="Get the authenticated user's profile, including role.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Return the current user - thin HTTP handler."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=UserSerializer,
    responses={200: UserSerializer},
    description="Update the authenticated user's name or phone.",
    tags=['auth'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    """Partially update the current user's profile."""
    serializer = UserSerializer(request.user, data=request.data, partial=True)
    serializer.is_valid(raise_exception=True)
    serializer.save()
    return Response(serializer.data)


class UserListView(generics.ListAPIView):
    """List active users (manager+), optionally filtered by role."""

    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, IsManagerRole]

    @extend_schema(
        parameters=[
            OpenApiParameter('role', OpenApiTypes.STR, description='Filter by role'),
        ],
        tags=['auth'],
    )
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)

    def get_queryset(self):
        query_serializer = UserListQuerySerializer(data=self.request.query_params)
        query_serializer.is_valid(raise_exception=True)
        return list_users(role=query_serializer.validated_data.get('role'))


@extend_schema(
    request=RoleChangeSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
        404: ErrorResponseSerializer,
    },
    description="Change a user's role (superadmin only).",
    tags=['auth'],
)
@api_view(['PUT'])
@permission_classes([IsAuthenticated, IsSuperAdminRole])
def change_role(request, pk):
    """Change a user's role - thin HTTP handler."""
    serializer = RoleChangeSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    try:
        user = change_user_role(
            actor=request.user,
            user_id=pk,
            new_role=serializer.validated_data['role'],
        )
    except InvalidRoleError as e:
        return Response({'error': str(e)}, status=status.HTTP_400_BAD_REQUEST)
    except InsufficientPermissionsError as e:
        return Response({'error': str(e)}, status=status.HTTP_403_FORBIDDEN)
    except UserNotFoundError as e:
        return Response({'error': str(e)}, status=status.HTTP_404_NOT_FOUND)

    return Response(UserSerializer(user).data)
