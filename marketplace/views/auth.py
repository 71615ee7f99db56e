"""
Authentication and registration endpoints.

Login is by e-mail and password and returns a simplejwt token pair whose
access token carries the user's role.  Registration endpoints create the
login and the role profile in one transaction; only patients can sign in
straight away, the other roles wait for administrator approval.
"""
from __future__ import annotations

import logging

from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.token_blacklist.models import BlacklistedToken, OutstandingToken
from rest_framework_simplejwt.tokens import RefreshToken

from ..authentication import issue_tokens
from ..models import Doctor, Hospital, Implant, Patient, Surgery, User
from ..permissions import IsAdminRole
from ..serializers.auth import (
    AdminRegisterSerializer,
    DoctorRegisterSerializer,
    HospitalRegisterSerializer,
    ImplantRegisterSerializer,
    LoginSerializer,
    PatientRegisterSerializer,
    RefreshSerializer,
)
from ..services import accounts
from ..services.audit import client_ip, log_action
from ..services.profiles import (
    serialize_doctor, serialize_hospital, serialize_implant, serialize_patient, serialize_staff,
    serialize_surgery, serialize_user,
)

logger = logging.getLogger(__name__)


def _token_payload(user: User) -> dict:
    refresh = issue_tokens(user)
    return {
        'ok': True,
        'access_token': str(refresh.access_token),
        'refresh_token': str(refresh),
        'token_type': 'bearer',
        'user_role': user.role,
        'user_id': user.id,
        'email': user.email,
    }


@api_view(['POST'])
@permission_classes([AllowAny])
def login_view(request):
    s = LoginSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    email = s.validated_data['email']
    try:
        user = accounts.check_credentials(email, s.validated_data['password'])
    except Exception:
        try:
            log_action(user=None, action='login', object_type='user',
                       detail={'result': 'fail', 'email': email, 'ip': client_ip(request)})
        except Exception:
            pass
        raise

    try:
        log_action(user=user, action='login', object_type='user', object_id=user.id,
                   detail={'result': 'ok', 'ip': client_ip(request)})
    except Exception:
        pass
    return Response(_token_payload(user), status=200)

# ScopedRateThrottle reads throttle_scope from the view class @api_view generates
login_view.cls.throttle_scope = 'login'


def _register(serializer_class, create, describe, request):
    s = serializer_class(data=request.data)
    s.is_valid(raise_exception=True)
    obj = create(s.validated_data)
    user = obj.user
    try:
        log_action(user=user, action='register', object_type=user.role, object_id=user.id,
                   detail={'ip': client_ip(request)})
    except Exception:
        pass
    payload = {'ok': True, 'user': serialize_user(user), 'profile': describe(obj)}
    if user.is_active:
        payload.update({k: v for k, v in _token_payload(user).items() if k != 'ok'})
    else:
        payload['message'] = 'Registration received. Your account will be activated once an administrator approves it.'
    return Response(payload, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([AllowAny])
def register_patient(request):
    return _register(PatientRegisterSerializer, accounts.register_patient, serialize_patient, request)

register_patient.cls.throttle_scope = 'register'


@api_view(['POST'])
@permission_classes([AllowAny])
def register_doctor(request):
    return _register(DoctorRegisterSerializer, accounts.register_doctor, serialize_doctor, request)

register_doctor.cls.throttle_scope = 'register'


@api_view(['POST'])
@permission_classes([AllowAny])
def register_hospital(request):
    def describe(staff):
        return {**serialize_hospital(staff.hospital), 'staff': serialize_staff(staff)}
    return _register(HospitalRegisterSerializer, accounts.register_hospital, describe, request)

register_hospital.cls.throttle_scope = 'register'


@api_view(['POST'])
@permission_classes([AllowAny])
def register_implant(request):
    def describe(staff):
        return {**serialize_implant(staff.implant), 'staff': serialize_staff(staff)}
    return _register(ImplantRegisterSerializer, accounts.register_implant, describe, request)

register_implant.cls.throttle_scope = 'register'


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def register_admin(request):
    s = AdminRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    profile = accounts.register_admin(s.validated_data)
    try:
        log_action(user=request.user, action='admin_create', object_type='user', object_id=profile.user_id)
    except Exception:
        pass
    return Response({'ok': True, 'user': serialize_user(profile.user), 'full_name': profile.full_name},
                    status=status.HTTP_201_CREATED)


@api_view(['GET'])
@permission_classes([AllowAny])
def registration_options(request):
    """Choice lists used by the registration forms."""
    return Response({
        'ok': True,
        'roles': [r for r, _ in User.ROLE_CHOICES if r != 'admin'],
        'genders': [g for g, _ in Patient.GENDER_CHOICES],
        'surgeries': [serialize_surgery(s) for s in Surgery.objects.all()],
        'specializations': sorted(set(
            Doctor.objects.filter(status=Doctor.STATUS_APPROVED)
            .exclude(primary_specialization='')
            .values_list('primary_specialization', flat=True)
        )),
        'hospitals': list(Hospital.objects.filter(status=Hospital.STATUS_APPROVED).values('id', 'name', 'city')),
        'implants': list(Implant.objects.filter(status=Implant.STATUS_APPROVED).values('id', 'name', 'brand')),
    })


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def me(request):
    user: User = request.user  # type: ignore[assignment]
    profile = None
    if user.role == 'patient' and hasattr(user, 'patient'):
        profile = serialize_patient(user.patient)
    elif user.role == 'doctor' and hasattr(user, 'doctor'):
        profile = serialize_doctor(user.doctor)
    elif user.role == 'hospital' and hasattr(user, 'hospital_user'):
        profile = {**serialize_staff(user.hospital_user), 'hospital': serialize_hospital(user.hospital_user.hospital)}
    elif user.role == 'implant' and hasattr(user, 'implant_user'):
        profile = {**serialize_staff(user.implant_user), 'implant': serialize_implant(user.implant_user.implant)}
    elif user.role == 'admin' and hasattr(user, 'admin_profile'):
        profile = {'full_name': user.admin_profile.full_name}
    return Response({'ok': True, 'user': serialize_user(user), 'profile': profile})


@api_view(['POST'])
@permission_classes([AllowAny])
def refresh_view(request):
    """Return a new access token from a refresh token."""
    s = RefreshSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    inner = TokenRefreshSerializer(data={'refresh': s.validated_data['refresh']})
    try:
        inner.is_valid(raise_exception=True)
    except TokenError as e:
        return Response({'ok': False, 'detail': str(e), 'error': 'token_not_valid'}, status=401)
    data = {'ok': True, 'access_token': inner.validated_data['access'], 'token_type': 'bearer'}
    if 'refresh' in inner.validated_data:
        data['refresh_token'] = inner.validated_data['refresh']
    return Response(data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def logout_view(request):
    """Blacklist the given refresh token, or every outstanding token of the user."""
    refresh = request.data.get('refresh') or request.data.get('refresh_token')
    count = 0
    if refresh:
        try:
            token = RefreshToken(refresh)
        except TokenError as e:
            return Response({'ok': False, 'detail': str(e), 'error': 'token_not_valid'}, status=400)
        if str(token.get('user_id')) != str(request.user.id):
            return Response({'ok': False, 'detail': 'Token does not belong to this user', 'error': 'permission_denied'},
                            status=403)
        token.blacklist()
        count = 1
    else:
        for token in OutstandingToken.objects.filter(user=request.user):
            _, created = BlacklistedToken.objects.get_or_create(token=token)
            count += int(created)
    return Response({'ok': True, 'blacklisted': count})
