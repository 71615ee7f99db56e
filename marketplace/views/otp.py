"""
OTP issuance/verification and the administrator OTP log.
"""
from __future__ import annotations

from django.conf import settings
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import OtpLog, User
from ..permissions import IsAdminRole
from ..serializers.otp import OtpGenerateSerializer, OtpListQuerySerializer, OtpVerifySerializer
from ..services import otp as otp_service
from ..services.audit import client_ip, log_action
from ..services.otp import serialize_otp
from ..services.pagination import paginate


@api_view(['POST'])
@permission_classes([AllowAny])
def generate_otp(request):
    s = OtpGenerateSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    user = None
    if v.get('user_id'):
        user = get_object_or_404(User, pk=v['user_id'])
    otp = otp_service.issue(
        otp_type=v['otp_type'],
        delivery_method=v['delivery_method'],
        phone=v.get('phone', ''),
        email=v.get('email', ''),
        user=user,
        expires_in_minutes=v.get('expires_in_minutes'),
        ip_address=client_ip(request),
        user_agent=request.META.get('HTTP_USER_AGENT', ''),
    )
    data = {
        'ok': True,
        'otp_id': otp.id,
        'expires_at': otp.expires_at.isoformat(),
        'message': f'OTP sent via {otp.delivery_method}',
    }
    if settings.OTP_EXPOSE_CODE:
        data['otp_code'] = otp.otp_code
    return Response(data, status=status.HTTP_201_CREATED)

# ScopedRateThrottle reads throttle_scope from the view class @api_view generates
generate_otp.cls.throttle_scope = 'otp'


@api_view(['POST'])
@permission_classes([AllowAny])
def verify_otp(request):
    s = OtpVerifySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    otp = otp_service.verify(otp_code=v['otp_code'], otp_type=v['otp_type'],
                             phone=v.get('phone', ''), email=v.get('email', ''))
    try:
        log_action(user=otp.user, action='otp_verify', object_type='otp', object_id=otp.id,
                   detail={'otp_type': otp.otp_type, 'ip': client_ip(request)})
    except Exception:
        pass
    return Response({'ok': True, 'message': 'OTP verified', 'otp_id': otp.id, 'user_id': otp.user_id})

verify_otp.cls.throttle_scope = 'otp'


def _filtered(request, qs):
    q = OtpListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    for field, value in q.validated_data.items():
        qs = qs.filter(**{field: value})
    return qs.order_by('-created_at')


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def otp_logs(request):
    qs = _filtered(request, OtpLog.objects.all())
    return Response(paginate(qs, request.query_params, serialize_otp, default_limit=50))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def user_otp_logs(request, user_id: int):
    get_object_or_404(User, pk=user_id)
    qs = _filtered(request, OtpLog.objects.filter(user_id=user_id))
    return Response(paginate(qs, request.query_params, serialize_otp, default_limit=50))


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def delete_otp_log(request, otp_id: int):
    otp = get_object_or_404(OtpLog, pk=otp_id)
    otp.delete()
    return Response({'ok': True, 'message': 'OTP log deleted'})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def cleanup_otp_logs(request):
    result = otp_service.cleanup()
    try:
        log_action(user=request.user, action='otp_cleanup', object_type='otp', detail=result)
    except Exception:
        pass
    return Response({'ok': True, **result})
