import json
from django.contrib.auth import authenticate
from django.contrib.auth.hashers import make_password
from django.views.decorators.csrf import csrf_exempt
from django.http import JsonResponse
from rest_framework.authtoken.models import Token
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from .models import CustomUser


def _error(detail: str, status_code: int):
    """Consistent error payload shape across API: {'detail': ...}."""
    return JsonResponse({'detail': detail}, status=status_code)


def _token_payload(user, token):
    return {
        'token': token.key,
        'role': user.role,
        'username': user.username,
    }


@csrf_exempt
@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    """
    Login endpoint that returns a token and user role
    """
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError:
        return _error('Invalid JSON', 400)

    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return _error('Username and password required', 400)

    user = authenticate(username=username, password=password)
    if not user:
        return _error('Invalid credentials', 401)

    token, _ = Token.objects.get_or_create(user=user)
    return JsonResponse(_token_payload(user, token))


@csrf_exempt
@api_view(['POST'])
@permission_classes([AllowAny])
def register_view(request):
    """
    Customer portal self-registration. Staff accounts are created in the admin.
    """
    try:
        data = json.loads(request.body)
    except json.JSONDecodeError:
        return _error('Invalid JSON', 400)

    username = data.get('username')
    password = data.get('password')
    if not username or not password:
        return _error('Username and password required', 400)

    if CustomUser.objects.filter(username=username).exists():
        return _error('Username already exists', 400)

    user = CustomUser.objects.create(
        username=username,
        email=data.get('email', ''),
        password=make_password(password),
        role='customer',
        company_name=data.get('company_name', ''),
        country_code=(data.get('country_code') or '').upper()[:2],
        phone=data.get('phone', ''),
    )
    token = Token.objects.create(user=user)
    return JsonResponse(_token_payload(user, token), status=201)
