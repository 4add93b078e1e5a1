import logging

from rest_framework import status, serializers
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import ParseError
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from drf_spectacular.utils import extend_schema
from .serializers import (
    UserRegistrationSerializer,
    UserLoginSerializer,
    UserSerializer,
)
from .services import (
    RegistrationErrorKind,
    RegistrationValidationError,
    UserRegistrationError,
    InvalidCredentialsError,
    InactiveAccountError,
    authenticate_user,
    get_registration_service,
    update_display_name,
)

logger = logging.getLogger(__name__)


# Status and public message per registration failure; driver detail stays in the logs
REGISTRATION_FAILURES = {
    RegistrationErrorKind.VALIDATION: (
        status.HTTP_400_BAD_REQUEST,
        'All fields are required',
    ),
    RegistrationErrorKind.CONFLICT: (
        status.HTTP_409_CONFLICT,
        'User with this email already exists',
    ),
    RegistrationErrorKind.STORE_UNAVAILABLE: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        'Server configuration error: Database connection failed. Please contact support.',
    ),
    RegistrationErrorKind.STORE_ERROR: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        'A database error occurred during registration.',
    ),
    RegistrationErrorKind.UNKNOWN: (
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        'An unexpected error occurred. Please try again later.',
    ),
}


# Response serializers for API documentation
class TokensResponseSerializer(serializers.Serializer):
    refresh = serializers.CharField()
    access = serializers.CharField()


class AuthResponseSerializer(serializers.Serializer):
    message = serializers.CharField()
    user = UserSerializer()
    tokens = TokensResponseSerializer()


class MessageResponseSerializer(serializers.Serializer):
    message = serializers.CharField()


class ErrorResponseSerializer(serializers.Serializer):
    error = serializers.CharField()


class LogoutRequestSerializer(serializers.Serializer):
    refresh = serializers.CharField(required=False, help_text="Refresh token being discarded")


class ProfileUpdateSerializer(serializers.Serializer):
    display_name = serializers.CharField(max_length=100, allow_blank=True)


@extend_schema(
    request=UserRegistrationSerializer,
    responses={
        201: MessageResponseSerializer,
        400: MessageResponseSerializer,
        409: MessageResponseSerializer,
        500: MessageResponseSerializer,
    },
    description="Register a new account with name, email and password.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def register(request):
    """Register a new user account."""
    try:
        serializer = UserRegistrationSerializer(data=request.data)
        if not serializer.is_valid():
            raise RegistrationValidationError("All fields are required")
        get_registration_service().register(**serializer.validated_data)
    except ParseError:
        kind = RegistrationErrorKind.VALIDATION
    except UserRegistrationError as e:
        kind = e.kind
    except Exception:
        logger.exception("Registration failed unexpectedly")
        kind = RegistrationErrorKind.UNKNOWN
    else:
        return Response(
            {'message': 'User registered successfully'},
            status=status.HTTP_201_CREATED
        )

    status_code, message = REGISTRATION_FAILURES[kind]
    return Response({'message': message}, status=status_code)


@extend_schema(
    request=UserLoginSerializer,
    responses={
        200: AuthResponseSerializer,
        400: ErrorResponseSerializer,
        401: ErrorResponseSerializer,
        403: ErrorResponseSerializer,
    },
    description="Authenticate with email and password to receive JWT tokens.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([AllowAny])
def login(request):
    """Login with email and password."""
    serializer = UserLoginSerializer(data=request.data)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    try:
        user = authenticate_user(**serializer.validated_data)
    except InvalidCredentialsError:
        return Response({
            'error': 'Invalid credentials'
        }, status=status.HTTP_401_UNAUTHORIZED)
    except InactiveAccountError:
        return Response({
            'error': 'Account is deactivated'
        }, status=status.HTTP_403_FORBIDDEN)

    refresh = RefreshToken.for_user(user)

    return Response({
        'message': 'Login successful',
        'user': UserSerializer(user).data,
        'tokens': {
            'refresh': str(refresh),
            'access': str(refresh.access_token),
        }
    })


@extend_schema(
    request=LogoutRequestSerializer,
    responses={
        200: MessageResponseSerializer,
        400: ErrorResponseSerializer,
    },
    description="Logout. A supplied refresh token is blacklisted and can no longer be refreshed.",
    tags=['auth'],
)
@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout(request):
    """Logout the current user, revoking the given refresh token."""
    refresh_token = request.data.get('refresh')
    if refresh_token:
        try:
            RefreshToken(refresh_token).blacklist()
        except TokenError:
            return Response({
                'error': 'Invalid token'
            }, status=status.HTTP_400_BAD_REQUEST)

    return Response({
        'message': 'Logout successful'
    })


@extend_schema(
    responses={200: UserSerializer},
    description="Get the current authenticated user's profile.",
    tags=['auth'],
)
@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_current_user(request):
    """Get current authenticated user profile."""
    return Response(UserSerializer(request.user).data)


@extend_schema(
    request=ProfileUpdateSerializer,
    responses={
        200: UserSerializer,
        400: ErrorResponseSerializer,
    },
    description="Update the current user's display name.",
    tags=['auth'],
)
@api_view(['PATCH'])
@permission_classes([IsAuthenticated])
def update_profile(request):
    """Update user profile."""
    serializer = ProfileUpdateSerializer(data=request.data, partial=True)

    if not serializer.is_valid():
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    if 'display_name' in serializer.validated_data:
        update_display_name(
            user=request.user,
            display_name=serializer.validated_data['display_name'],
        )

    return Response(UserSerializer(request.user).data)
