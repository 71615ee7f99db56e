"""
Commission agreement endpoints (administrators only).
"""
from __future__ import annotations

from django.db.models import Q
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import CommissionAgreement
from ..permissions import IsAdminRole
from ..serializers.commission import (
    AgreementListQuerySerializer,
    AgreementSerializer,
    AgreementStatusSerializer,
    AgreementUpdateSerializer,
)
from ..services import agreements as agreement_service
from ..services.agreements import ENTITY_MODELS, serialize_agreement
from ..services.audit import log_action
from ..services.commission import serialize_transaction
from ..services.pagination import paginate


def _audit(request, action, agreement, detail=None):
    try:
        log_action(user=request.user, action=action, object_type='commission_agreement',
                   object_id=agreement.id, detail=detail)
    except Exception:
        pass


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def agreements(request):
    if request.method == 'POST':
        s = AgreementSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        agreement = agreement_service.create_agreement(s.validated_data, created_by=request.user)
        _audit(request, 'agreement_create', agreement)
        return Response({'ok': True, 'data': serialize_agreement(agreement)}, status=status.HTTP_201_CREATED)

    q = AgreementListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    qs = CommissionAgreement.objects.order_by('-created_at')
    for field, value in q.validated_data.items():
        qs = qs.filter(**{field: value})
    return Response(paginate(qs, request.query_params, serialize_agreement))


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def active_agreements(request):
    """Active agreements in force today."""
    today = timezone.localdate()
    qs = (CommissionAgreement.objects
          .filter(status='active', effective_date__lte=today)
          .filter(Q(expiry_date__isnull=True) | Q(expiry_date__gte=today))
          .order_by('entity_type', 'entity_id'))
    return Response({'ok': True, 'data': [serialize_agreement(a) for a in qs]})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def entity_agreements(request, entity_type: str, entity_id: int):
    if entity_type not in ENTITY_MODELS:
        return Response({'ok': False, 'detail': f'Unknown entity type: {entity_type}', 'error': 'invalid'},
                        status=400)
    qs = CommissionAgreement.objects.filter(entity_type=entity_type, entity_id=entity_id).order_by('-effective_date')
    return Response({'ok': True, 'data': [serialize_agreement(a) for a in qs]})


@api_view(['GET', 'PUT', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def agreement_detail(request, agreement_id: int):
    agreement = get_object_or_404(CommissionAgreement, pk=agreement_id)
    if request.method == 'PUT':
        s = AgreementUpdateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        agreement = agreement_service.update_agreement(agreement, s.validated_data)
        _audit(request, 'agreement_update', agreement, {'fields': sorted(s.validated_data)})
        return Response({'ok': True, 'data': serialize_agreement(agreement)})
    if request.method == 'DELETE':
        agreement_service.delete_agreement(agreement)
        _audit(request, 'agreement_delete', agreement)
        return Response({'ok': True, 'message': 'Agreement deleted'})

    recent = agreement.transactions.select_related('booking').order_by('-transaction_date')[:10]
    data = serialize_agreement(agreement)
    data['recent_transactions'] = [serialize_transaction(t) for t in recent]
    return Response({'ok': True, 'data': data})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def agreement_status(request, agreement_id: int):
    agreement = get_object_or_404(CommissionAgreement, pk=agreement_id)
    s = AgreementStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    previous = agreement.status
    agreement = agreement_service.change_status(agreement, s.validated_data['status'])
    _audit(request, 'agreement_status', agreement, {'from': previous, 'to': agreement.status})
    return Response({'ok': True, 'data': serialize_agreement(agreement)})


@api_view(['POST', 'PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def approve_agreement(request, agreement_id: int):
    agreement = agreement_service.approve_agreement(agreement_id, by=request.user)
    _audit(request, 'agreement_approve', agreement)
    return Response({'ok': True, 'message': 'Agreement approved', 'data': serialize_agreement(agreement)})
