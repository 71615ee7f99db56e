"""
Administrator console endpoints.

Entities created here skip the review queue: they are stored already
approved with the acting administrator recorded as approver.
"""
from __future__ import annotations

from django.db.models import ProtectedError, Q
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import Booking, Doctor, Hospital, Implant, Patient
from ..permissions import IsAdminRole
from ..serializers.auth import (
    DoctorRegisterSerializer,
    HospitalRegisterSerializer,
    ImplantRegisterSerializer,
    PatientRegisterSerializer,
)
from ..serializers.bookings import BookingListQuerySerializer
from ..serializers.profiles import RejectSerializer
from ..services import accounts, approvals
from ..services.audit import log_action
from ..services.bookings import BOOKING_RELATED, serialize_booking
from ..services.pagination import paginate
from ..services.profiles import serialize_doctor, serialize_hospital, serialize_implant, serialize_patient


def _audit(request, action, object_type, object_id):
    try:
        log_action(user=request.user, action=action, object_type=object_type, object_id=object_id)
    except Exception:
        pass


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_doctors(request):
    if request.method == 'POST':
        s = DoctorRegisterSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        doctor = accounts.register_doctor(s.validated_data, approved_by=request.user)
        _audit(request, 'admin_create_doctor', 'doctor', doctor.id)
        return Response({'ok': True, 'data': serialize_doctor(doctor)}, status=status.HTTP_201_CREATED)

    qs = Doctor.objects.select_related('user').order_by('-created_at')
    status_filter = request.query_params.get('status')
    if status_filter:
        qs = qs.filter(status=status_filter)
    search = request.query_params.get('search')
    if search:
        qs = qs.filter(Q(full_name__icontains=search) | Q(user__email__icontains=search)
                       | Q(medical_council_number__icontains=search))
    return Response(paginate(qs, request.query_params, lambda d: serialize_doctor(d, include_surgeries=False)))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_patients(request):
    if request.method == 'POST':
        s = PatientRegisterSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        patient = accounts.register_patient(s.validated_data)
        _audit(request, 'admin_create_patient', 'patient', patient.id)
        return Response({'ok': True, 'data': serialize_patient(patient)}, status=status.HTTP_201_CREATED)

    qs = Patient.objects.select_related('user').order_by('-created_at')
    search = request.query_params.get('search')
    if search:
        qs = qs.filter(Q(full_name__icontains=search) | Q(user__email__icontains=search) | Q(phone__icontains=search))
    return Response(paginate(qs, request.query_params, serialize_patient))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_bookings(request):
    q = BookingListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = Booking.objects.select_related(*BOOKING_RELATED).order_by('-created_at')
    if q.validated_data.get('status'):
        qs = qs.filter(status=q.validated_data['status'])
    return Response(paginate(qs, request.query_params, serialize_booking))


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_create_hospital(request):
    s = HospitalRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    staff = accounts.register_hospital(s.validated_data, approved_by=request.user)
    _audit(request, 'admin_create_hospital', 'hospital', staff.hospital_id)
    return Response({'ok': True, 'data': serialize_hospital(staff.hospital)}, status=status.HTTP_201_CREATED)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_create_implant(request):
    s = ImplantRegisterSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    staff = accounts.register_implant(s.validated_data, approved_by=request.user)
    _audit(request, 'admin_create_implant', 'implant', staff.implant_id)
    return Response({'ok': True, 'data': serialize_implant(staff.implant)}, status=status.HTTP_201_CREATED)


def _delete_with_staff(request, entity, label: str):
    entity_id = entity.pk
    users = [s.user for s in entity.staff.select_related('user')]
    try:
        entity.delete()
    except ProtectedError:
        return Response({'ok': False, 'detail': f'{label.capitalize()} has bookings and cannot be deleted',
                         'error': 'conflict'}, status=status.HTTP_409_CONFLICT)
    for user in users:
        user.delete()
    _audit(request, f'admin_delete_{label}', label, entity_id)
    return Response({'ok': True, 'message': f'{label.capitalize()} deleted'})


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_delete_hospital(request, hospital_id: int):
    hospital = get_object_or_404(Hospital, pk=hospital_id)
    return _delete_with_staff(request, hospital, 'hospital')


@api_view(['DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_delete_implant(request, implant_id: int):
    implant = get_object_or_404(Implant, pk=implant_id)
    return _delete_with_staff(request, implant, 'implant')


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_approve_doctor(request, doctor_id: int):
    doctor = approvals.approve(Doctor, doctor_id, by=request.user)
    return Response({'ok': True, 'message': 'Doctor approved', 'data': serialize_doctor(doctor)})


@api_view(['PUT', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def admin_reject_doctor(request, doctor_id: int):
    s = RejectSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    doctor = approvals.reject(Doctor, doctor_id, by=request.user, reason=s.validated_data['reason'])
    return Response({'ok': True, 'message': 'Doctor rejected', 'data': serialize_doctor(doctor)})
