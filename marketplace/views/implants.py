"""
Implant catalogue and manufacturer endpoints.
"""
from __future__ import annotations

from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import Implant, ImplantUser
from ..permissions import IsAdminRole, role_permission
from ..serializers.profiles import ImplantPriceSerializer, ImplantUpdateSerializer, RejectSerializer
from ..services import approvals
from ..services.audit import log_action
from ..services.pagination import paginate
from ..services.profiles import serialize_implant, serialize_staff

IsAdminOrImplant = role_permission('admin', 'implant')


def _may_edit(user, implant: Implant) -> bool:
    return user.role == 'admin' or ImplantUser.objects.filter(user=user, implant=implant).exists()


@api_view(['GET'])
@permission_classes([AllowAny])
def list_implants(request):
    qs = Implant.objects.filter(status=Implant.STATUS_APPROVED).order_by('name')
    surgery_type = request.query_params.get('surgery_type')
    if surgery_type:
        qs = qs.filter(surgery_type__icontains=surgery_type)
    search = request.query_params.get('search')
    if search:
        qs = qs.filter(Q(name__icontains=search) | Q(brand__icontains=search) | Q(manufacturer__icontains=search))
    return Response(paginate(qs, request.query_params, serialize_implant))


@api_view(['GET'])
@permission_classes([AllowAny])
def implant_detail(request, implant_id: int):
    implant = get_object_or_404(Implant, pk=implant_id)
    user = request.user
    if implant.status != Implant.STATUS_APPROVED and not (user and user.is_authenticated and _may_edit(user, implant)):
        return Response({'ok': False, 'detail': 'Implant not found', 'error': 'not_found'}, status=404)
    data = serialize_implant(implant)
    if user and user.is_authenticated and _may_edit(user, implant):
        data['staff'] = [serialize_staff(s) for s in implant.staff.select_related('user')]
    return Response({'ok': True, 'data': data})


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdminOrImplant])
def update_implant(request, implant_id: int):
    implant = get_object_or_404(Implant, pk=implant_id)
    if not _may_edit(request.user, implant):
        return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                        status=status.HTTP_403_FORBIDDEN)
    s = ImplantUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    for field, value in s.validated_data.items():
        setattr(implant, field, value)
    implant.save()
    return Response({'ok': True, 'data': serialize_implant(implant)})


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdminOrImplant])
def update_implant_price(request, implant_id: int):
    implant = get_object_or_404(Implant, pk=implant_id)
    if not _may_edit(request.user, implant):
        return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                        status=status.HTTP_403_FORBIDDEN)
    s = ImplantPriceSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    old = implant.price
    implant.price = s.validated_data['price']
    implant.save(update_fields=['price', 'updated_at'])
    try:
        log_action(user=request.user, action='implant_price', object_type='implant', object_id=implant.id,
                   detail={'from': str(old), 'to': str(implant.price)})
    except Exception:
        pass
    return Response({'ok': True, 'data': serialize_implant(implant)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def pending_implants(request):
    qs = Implant.objects.filter(status=Implant.STATUS_PENDING).order_by('created_at')
    return Response(paginate(qs, request.query_params, serialize_implant))


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def approve_implant(request, implant_id: int):
    implant = approvals.approve(Implant, implant_id, by=request.user)
    return Response({'ok': True, 'message': 'Implant approved', 'data': serialize_implant(implant)})


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def reject_implant(request, implant_id: int):
    s = RejectSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    implant = approvals.reject(Implant, implant_id, by=request.user, reason=s.validated_data['reason'])
    return Response({'ok': True, 'message': 'Implant rejected', 'data': serialize_implant(implant)})
