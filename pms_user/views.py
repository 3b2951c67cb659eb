# pms_user/views.py
import logging

from rest_framework.views import APIView
from rest_framework.response import Response
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.authtoken.models import Token
from rest_framework import status
from .models import User
from .permissions import IsAdminRole
from .serializers import UserSerializer, RegisterSerializer, LoginSerializer, auth_payload, error_message

logger = logging.getLogger(__name__)


class RegisterView(APIView):
    """
    Create a USER-role account and return a bearer token for it.
    Registration never grants the ADMIN role.
    """
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': error_message(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)

        if User.objects.filter(email__iexact=serializer.validated_data['email']).exists():
            return Response({'message': 'Email already registered'}, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.save()
        token, _ = Token.objects.get_or_create(user=user)
        logger.info("Registered user %s", user.email)
        return Response(auth_payload(user, token), status=status.HTTP_200_OK)


class LoginView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        if not serializer.is_valid():
            return Response({'message': error_message(serializer.errors)}, status=status.HTTP_400_BAD_REQUEST)
        email = serializer.validated_data['email'].strip().lower()

        user = User.objects.filter(email__iexact=email, deleted_at__isnull=True, is_active=True).first()
        if user is None or not user.check_password(serializer.validated_data['password']):
            logger.info("Failed login for %s", email)
            return Response({'message': 'Invalid email or password'}, status=status.HTTP_400_BAD_REQUEST)

        token, _ = Token.objects.get_or_create(user=user)
        return Response(auth_payload(user, token))


class UserListView(APIView):
    """List every active user; used to pick assignees and members."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        users = User.objects.filter(deleted_at__isnull=True)
        return Response(UserSerializer(users, many=True).data)


class AdminUserListView(UserListView):
    permission_classes = [IsAuthenticated, IsAdminRole]


class CurrentUserView(APIView):
    def get(self, request):
        return Response(UserSerializer(request.user).data)
