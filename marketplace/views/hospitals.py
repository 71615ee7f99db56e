"""
Hospital directory, staff management and approval endpoints.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import Hospital, HospitalUser, User
from ..permissions import IsAdminRole, role_permission
from ..serializers.profiles import HospitalUpdateSerializer, RejectSerializer, StaffCreateSerializer
from ..services import approvals
from ..services.accounts import add_hospital_staff
from ..services.audit import log_action
from ..services.pagination import paginate
from ..services.profiles import serialize_hospital, serialize_staff

IsAdminOrHospital = role_permission('admin', 'hospital')


def _staff_record(user: User, hospital: Hospital):
    return HospitalUser.objects.filter(user=user, hospital=hospital).first()


def _denied():
    return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                    status=status.HTTP_403_FORBIDDEN)


@api_view(['GET'])
@permission_classes([AllowAny])
def list_hospitals(request):
    qs = Hospital.objects.filter(status=Hospital.STATUS_APPROVED).order_by('name')
    city = request.query_params.get('city')
    if city:
        qs = qs.filter(city__iexact=city)
    search = request.query_params.get('search')
    if search:
        qs = qs.filter(name__icontains=search)
    return Response(paginate(qs, request.query_params, serialize_hospital))


@api_view(['GET'])
@permission_classes([AllowAny])
def hospital_detail(request, hospital_id: int):
    hospital = get_object_or_404(Hospital, pk=hospital_id)
    user = request.user
    if hospital.status != Hospital.STATUS_APPROVED:
        # unapproved hospitals are visible to admins and their own staff only
        if not (user and user.is_authenticated and (user.role == 'admin' or _staff_record(user, hospital))):
            return Response({'ok': False, 'detail': 'Hospital not found', 'error': 'not_found'}, status=404)
    return Response({'ok': True, 'data': serialize_hospital(hospital)})


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdminOrHospital])
def update_hospital(request, hospital_id: int):
    hospital = get_object_or_404(Hospital, pk=hospital_id)
    if request.user.role != 'admin' and not _staff_record(request.user, hospital):
        return _denied()
    s = HospitalUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    for field, value in s.validated_data.items():
        setattr(hospital, field, value)
    hospital.save()
    return Response({'ok': True, 'data': serialize_hospital(hospital)})


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminOrHospital])
def hospital_staff(request, hospital_id: int):
    """List hospital staff, or add a staff login (primary admin or administrator)."""
    hospital = get_object_or_404(Hospital, pk=hospital_id)
    me = _staff_record(request.user, hospital)
    is_admin = request.user.role == 'admin'
    if not is_admin and me is None:
        return _denied()
    if request.method == 'POST':
        if not is_admin and not me.is_primary_admin:
            return _denied()
        s = StaffCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        staff = add_hospital_staff(hospital, s.validated_data)
        try:
            log_action(user=request.user, action='hospital_staff_add', object_type='hospital',
                       object_id=hospital.id, detail={'user_id': staff.user_id})
        except Exception:
            pass
        return Response({'ok': True, 'data': serialize_staff(staff)}, status=status.HTTP_201_CREATED)
    rows = hospital.staff.select_related('user').order_by('-is_primary_admin', 'full_name')
    return Response({'ok': True, 'data': [serialize_staff(r) for r in rows]})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def pending_hospitals(request):
    qs = Hospital.objects.filter(status=Hospital.STATUS_PENDING).order_by('created_at')
    return Response(paginate(qs, request.query_params, serialize_hospital))


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def approve_hospital(request, hospital_id: int):
    hospital = approvals.approve(Hospital, hospital_id, by=request.user)
    return Response({'ok': True, 'message': 'Hospital approved', 'data': serialize_hospital(hospital)})


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def reject_hospital(request, hospital_id: int):
    s = RejectSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    hospital = approvals.reject(Hospital, hospital_id, by=request.user, reason=s.validated_data['reason'])
    return Response({'ok': True, 'message': 'Hospital rejected', 'data': serialize_hospital(hospital)})
