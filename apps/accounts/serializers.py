from rest_framework import serializers
from .models import User, UserRole


class UserSerializer(serializers.ModelSerializer):
    """Serializer for user details."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'name',
            'display_name',
            'phone',
            'role',
            'is_active',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'role', 'is_active', 'created_at', 'last_login']

    def get_display_name(self, obj):
        return obj.get_display_name()


class UserMinimalSerializer(serializers.ModelSerializer):
    """Minimal user info for nested serialization."""

    display_name = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'email', 'display_name', 'role']
        read_only_fields = fields

    def get_display_name(self, obj):
        return obj.get_display_name()


class RoleChangeSerializer(serializers.Serializer):
    """Input serializer for role changes."""

    role = serializers.ChoiceField(choices=UserRole.choices)


class UserListQuerySerializer(serializers.Serializer):
    """Query parameters for the user list."""

    role = serializers.ChoiceField(choices=UserRole.choices, required=False)
