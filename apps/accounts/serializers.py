from rest_framework import serializers
from .models import User


class UserSerializer(serializers.ModelSerializer):
    """Basic user serializer for profile display."""

    class Meta:
        model = User
        fields = [
            'id',
            'email',
            'display_name',
            'created_at',
            'last_login',
        ]
        read_only_fields = ['id', 'email', 'created_at', 'last_login']


class TextField(serializers.CharField):
    """CharField that refuses numbers and other non-string JSON values."""

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('invalid')
        return super().to_internal_value(data)


class UserRegistrationSerializer(serializers.Serializer):
    """Serializer for user registration."""

    name = TextField(required=True)
    email = TextField(required=True)
    password = TextField(
        write_only=True,
        required=True,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )


class UserLoginSerializer(serializers.Serializer):
    """Serializer for user login."""

    email = serializers.EmailField(required=True)
    password = serializers.CharField(
        required=True,
        write_only=True,
        trim_whitespace=False,
        style={'input_type': 'password'}
    )
