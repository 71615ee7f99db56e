"""
Doctor directory, profile maintenance and approval endpoints.

The public directory lists approved surgeons only.  Doctors maintain
their own profile and surgery list; administrators review pending
registrations.
"""
from __future__ import annotations

from django.db import transaction
from django.db.models import Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import Doctor, DoctorSurgery, Surgery, User
from ..permissions import IsAdminRole, IsAdminOrDoctor
from ..serializers.profiles import (
    DoctorListQuerySerializer,
    DoctorSurgeriesSerializer,
    DoctorUpdateSerializer,
    RejectSerializer,
)
from ..services import approvals
from ..services.pagination import paginate
from ..services.profiles import doctor_completeness, serialize_doctor, serialize_surgery


def _public_doctors():
    return (Doctor.objects.filter(status=Doctor.STATUS_APPROVED, user__is_active=True)
            .select_related('user').order_by('-rating', 'full_name'))


@api_view(['GET'])
@permission_classes([AllowAny])
def list_doctors(request):
    q = DoctorListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    qs = _public_doctors()
    if v.get('specialization'):
        spec = v['specialization']
        qs = qs.filter(Q(primary_specialization__icontains=spec) | Q(secondary_specializations__icontains=spec))
    if v.get('city'):
        qs = qs.filter(city__iexact=v['city'])
    if v.get('surgery_id'):
        qs = qs.filter(doctor_surgeries__surgery_id=v['surgery_id']).distinct()
    if v.get('search'):
        qs = qs.filter(Q(full_name__icontains=v['search']) | Q(primary_specialization__icontains=v['search']))
    return Response(paginate(qs, request.query_params, lambda d: serialize_doctor(d, include_surgeries=False)))


@api_view(['GET'])
@permission_classes([AllowAny])
def doctor_detail(request, doctor_id: int):
    doctor = get_object_or_404(_public_doctors(), pk=doctor_id)
    return Response({'ok': True, 'data': serialize_doctor(doctor)})


def _own_or_admin(request, doctor: Doctor) -> bool:
    user: User = request.user  # type: ignore[assignment]
    return user.role == 'admin' or doctor.user_id == user.id


@api_view(['PUT', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdminOrDoctor])
def update_doctor(request, doctor_id: int):
    doctor = get_object_or_404(Doctor.objects.select_related('user'), pk=doctor_id)
    if not _own_or_admin(request, doctor):
        return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                        status=status.HTTP_403_FORBIDDEN)
    s = DoctorUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    for field, value in s.validated_data.items():
        setattr(doctor, field, value)
    doctor.profile_completeness = doctor_completeness(doctor)
    doctor.save()
    return Response({'ok': True, 'data': serialize_doctor(doctor)})


@api_view(['GET', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminOrDoctor])
def doctor_surgeries(request, doctor_id: int):
    """List or replace the surgeries a doctor performs."""
    doctor = get_object_or_404(Doctor, pk=doctor_id)
    if not _own_or_admin(request, doctor):
        return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                        status=status.HTTP_403_FORBIDDEN)
    if request.method == 'PUT':
        s = DoctorSurgeriesSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        items = s.validated_data['surgeries']
        ids = [i['surgery_id'] for i in items]
        if len(set(ids)) != len(ids):
            return Response({'ok': False, 'detail': 'Duplicate surgery ids', 'error': 'invalid'}, status=400)
        known = set(Surgery.objects.filter(pk__in=ids).values_list('pk', flat=True))
        missing = sorted(set(ids) - known)
        if missing:
            return Response({'ok': False, 'detail': f'Unknown surgery ids: {missing}', 'error': 'not_found'}, status=404)
        with transaction.atomic():
            DoctorSurgery.objects.filter(doctor=doctor).delete()
            DoctorSurgery.objects.bulk_create([DoctorSurgery(doctor=doctor, **i) for i in items])
    rows = DoctorSurgery.objects.filter(doctor=doctor).select_related('surgery')
    return Response({'ok': True, 'data': [
        {**serialize_surgery(r.surgery), 'is_primary': r.is_primary, 'experience_years': r.experience_years,
         'procedures_completed': r.procedures_completed}
        for r in rows
    ]})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def pending_doctors(request):
    qs = Doctor.objects.filter(status=Doctor.STATUS_PENDING).select_related('user').order_by('created_at')
    return Response(paginate(qs, request.query_params, serialize_doctor))


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def approve_doctor(request, doctor_id: int):
    doctor = approvals.approve(Doctor, doctor_id, by=request.user)
    doctor.refresh_from_db()
    return Response({'ok': True, 'message': 'Doctor approved', 'data': serialize_doctor(doctor)})


@api_view(['POST', 'PUT'])
@permission_classes([IsAuthenticated, IsAdminRole])
def reject_doctor(request, doctor_id: int):
    s = RejectSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    doctor = approvals.reject(Doctor, doctor_id, by=request.user, reason=s.validated_data['reason'])
    return Response({'ok': True, 'message': 'Doctor rejected', 'data': serialize_doctor(doctor)})


@api_view(['GET'])
@permission_classes([AllowAny])
def list_surgeries(request):
    qs = Surgery.objects.all()
    category = request.query_params.get('category')
    if category:
        qs = qs.filter(category__iexact=category)
    return Response({'ok': True, 'data': [serialize_surgery(s) for s in qs]})


@api_view(['GET'])
@permission_classes([AllowAny])
def surgery_detail(request, surgery_id: int):
    surgery = get_object_or_404(Surgery, pk=surgery_id)
    doctors = _public_doctors().filter(doctor_surgeries__surgery=surgery).distinct()
    return Response({'ok': True, 'data': {
        **serialize_surgery(surgery),
        'doctors': [serialize_doctor(d, include_surgeries=False) for d in doctors[:20]],
    }})
