"""
Patient testimonial endpoints.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import Doctor, PatientTestimonial
from ..permissions import IsAdminOrPatient, IsAdminRole, IsPatientRole, ReadOnly
from ..serializers.reviews import (
    DoctorTestimonialQuerySerializer,
    FeaturedTestimonialQuerySerializer,
    TestimonialCreateSerializer,
    TestimonialListQuerySerializer,
    TestimonialUpdateSerializer,
    TestimonialVerifySerializer,
)
from ..services import testimonials as testimonial_service
from ..services.audit import log_action
from ..services.pagination import paginate
from ..services.testimonials import serialize_testimonial


def _audit(request, action: str, object_id: int) -> None:
    try:
        log_action(user=request.user, action=action, object_type='testimonial', object_id=object_id)
    except Exception:
        pass


@api_view(['GET', 'POST'])
@permission_classes([ReadOnly | IsAdminOrPatient])
def testimonials(request):
    if request.method == 'POST':
        s = TestimonialCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        t = testimonial_service.create_testimonial(request.user, s.validated_data)
        _audit(request, 'testimonial_create', t.id)
        return Response({'ok': True, 'data': serialize_testimonial(t)}, status=status.HTTP_201_CREATED)

    q = TestimonialListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    qs = testimonial_service.public_testimonials().order_by('display_order', '-created_at')
    if v.get('doctor_id'):
        qs = qs.filter(doctor_id=v['doctor_id'])
    if v.get('hospital_id'):
        qs = qs.filter(hospital_id=v['hospital_id'])
    if v.get('region'):
        qs = qs.filter(region=v['region'])
    for flag in ('is_featured', 'is_verified'):
        if v.get(flag) is not None:
            qs = qs.filter(**{flag: v[flag]})
    return Response(paginate(qs, request.query_params, serialize_testimonial))


@api_view(['GET'])
@permission_classes([AllowAny])
def featured_testimonials(request):
    q = FeaturedTestimonialQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    rows = testimonial_service.featured(q.validated_data.get('region'), q.validated_data['limit'])
    return Response({'ok': True, 'data': [serialize_testimonial(t) for t in rows]})


@api_view(['GET'])
@permission_classes([AllowAny])
def doctor_testimonials(request, doctor_id: int):
    get_object_or_404(Doctor, pk=doctor_id)
    q = DoctorTestimonialQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = testimonial_service.public_testimonials().filter(doctor_id=doctor_id)
    if q.validated_data.get('verified_only') is not False:
        qs = qs.filter(is_verified=True)
    return Response(paginate(qs.order_by('display_order', '-created_at'), request.query_params,
                             serialize_testimonial))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsPatientRole])
def my_testimonials(request):
    qs = (PatientTestimonial.objects.select_related('doctor', 'patient')
          .filter(patient__user=request.user).order_by('-created_at'))
    return Response(paginate(qs, request.query_params, serialize_testimonial))


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([ReadOnly | IsAdminOrPatient])
def testimonial_detail(request, testimonial_id: int):
    t = get_object_or_404(PatientTestimonial.objects.select_related('doctor', 'patient'), pk=testimonial_id)
    if request.method == 'GET':
        if not t.consent_for_display and not (request.user.is_authenticated
                                              and testimonial_service.can_edit(request.user, t)):
            return Response({'ok': False, 'detail': 'Testimonial not found', 'error': 'not_found'},
                            status=status.HTTP_404_NOT_FOUND)
        return Response({'ok': True, 'data': serialize_testimonial(t)})

    if not testimonial_service.can_edit(request.user, t):
        return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                        status=status.HTTP_403_FORBIDDEN)
    if request.method == 'DELETE':
        t.delete()
        _audit(request, 'testimonial_delete', testimonial_id)
        return Response({'ok': True, 'message': 'Testimonial deleted'})
    s = TestimonialUpdateSerializer(data=request.data, partial=True)
    s.is_valid(raise_exception=True)
    t = testimonial_service.update_testimonial(t, s.validated_data)
    _audit(request, 'testimonial_update', t.id)
    return Response({'ok': True, 'data': serialize_testimonial(t)})


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def verify_testimonial(request, testimonial_id: int):
    t = get_object_or_404(PatientTestimonial.objects.select_related('doctor', 'patient'), pk=testimonial_id)
    s = TestimonialVerifySerializer(data=request.data)
    s.is_valid(raise_exception=True)
    t = testimonial_service.verify(t, by=request.user, **s.validated_data)
    _audit(request, 'testimonial_verify', t.id)
    return Response({'ok': True, 'data': serialize_testimonial(t)})
