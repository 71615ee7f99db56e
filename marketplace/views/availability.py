"""
Doctor and hospital availability endpoints.

Published calendars of approved providers are public.  Doctors manage
their own dates, hospital staff manage their facilities, administrators
manage both.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import Doctor, DoctorAvailability, HospitalAvailability
from ..permissions import IsAdminOrDoctor, IsDoctorRole, ReadOnly, role_permission
from ..serializers.availability import (
    DoctorAvailabilityQuerySerializer,
    DoctorAvailabilitySerializer,
    HospitalAvailabilityQuerySerializer,
    HospitalAvailabilitySerializer,
    MyAvailabilityQuerySerializer,
    TravelingDoctorQuerySerializer,
)
from ..services import availability as availability_service
from ..services.audit import log_action
from ..services.availability import serialize_doctor_slot, serialize_hospital_slot
from ..services.pagination import paginate

IsAdminOrHospital = role_permission('admin', 'hospital')


def _denied():
    return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                    status=status.HTTP_403_FORBIDDEN)


def _audit(request, action: str, object_type: str, object_id: int) -> None:
    try:
        log_action(user=request.user, action=action, object_type=object_type, object_id=object_id)
    except Exception:
        pass


@api_view(['GET', 'POST'])
@permission_classes([ReadOnly | IsAdminOrDoctor])
def doctor_availability(request):
    if request.method == 'POST':
        s = DoctorAvailabilitySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        slot = availability_service.create_doctor_slot(request.user, s.validated_data)
        _audit(request, 'doctor_availability_create', 'doctor_availability', slot.id)
        return Response({'ok': True, 'data': serialize_doctor_slot(slot)}, status=status.HTTP_201_CREATED)

    q = DoctorAvailabilityQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = availability_service.doctor_listing(q.validated_data)
    return Response(paginate(qs, request.query_params, serialize_doctor_slot))


@api_view(['GET'])
@permission_classes([AllowAny])
def traveling_doctors(request):
    q = TravelingDoctorQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = availability_service.traveling_doctors(q.validated_data)
    return Response(paginate(qs, request.query_params, serialize_doctor_slot))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsDoctorRole])
def my_doctor_availability(request):
    doctor = get_object_or_404(Doctor, user=request.user)
    q = MyAvailabilityQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    upcoming_only = q.validated_data.get('upcoming_only') is not False
    qs = availability_service.doctor_calendar(doctor, upcoming_only=upcoming_only).select_related('doctor')
    return Response(paginate(qs, request.query_params, serialize_doctor_slot))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([ReadOnly | IsAdminOrDoctor])
def doctor_availability_detail(request, availability_id: int):
    slot = get_object_or_404(DoctorAvailability.objects.select_related('doctor'), pk=availability_id)
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_doctor_slot(slot)})
    if not availability_service.owns_doctor(request.user, slot.doctor):
        return _denied()
    if request.method == 'DELETE':
        slot.delete()
        _audit(request, 'doctor_availability_delete', 'doctor_availability', availability_id)
        return Response({'ok': True, 'message': 'Availability deleted'})
    s = DoctorAvailabilitySerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    slot = availability_service.update_slot(slot, dict(s.validated_data))
    _audit(request, 'doctor_availability_update', 'doctor_availability', slot.id)
    return Response({'ok': True, 'data': serialize_doctor_slot(slot)})


@api_view(['GET', 'POST'])
@permission_classes([ReadOnly | IsAdminOrHospital])
def hospital_availability(request):
    if request.method == 'POST':
        s = HospitalAvailabilitySerializer(data=request.data)
        s.is_valid(raise_exception=True)
        slot = availability_service.create_hospital_slot(request.user, s.validated_data)
        _audit(request, 'hospital_availability_create', 'hospital_availability', slot.id)
        return Response({'ok': True, 'data': serialize_hospital_slot(slot)}, status=status.HTTP_201_CREATED)

    q = HospitalAvailabilityQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = availability_service.hospital_listing(q.validated_data)
    return Response(paginate(qs, request.query_params, serialize_hospital_slot))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([ReadOnly | IsAdminOrHospital])
def hospital_availability_detail(request, availability_id: int):
    slot = get_object_or_404(HospitalAvailability.objects.select_related('hospital'), pk=availability_id)
    if request.method == 'GET':
        return Response({'ok': True, 'data': serialize_hospital_slot(slot)})
    if not availability_service.owns_hospital(request.user, slot.hospital):
        return _denied()
    if request.method == 'DELETE':
        slot.delete()
        _audit(request, 'hospital_availability_delete', 'hospital_availability', availability_id)
        return Response({'ok': True, 'message': 'Availability deleted'})
    s = HospitalAvailabilitySerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    slot = availability_service.update_slot(slot, dict(s.validated_data))
    _audit(request, 'hospital_availability_update', 'hospital_availability', slot.id)
    return Response({'ok': True, 'data': serialize_hospital_slot(slot)})
