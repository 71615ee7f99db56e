"""
Commission transaction endpoints (administrators only).
"""
from __future__ import annotations

from django.db.models import Sum
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import CommissionAgreement, CommissionTransaction
from ..permissions import IsAdminRole
from ..serializers.commission import (
    PaymentStatusSerializer,
    TransactionCreateSerializer,
    TransactionListQuerySerializer,
)
from ..services import commission
from ..services.audit import log_action
from ..services.commission import ZERO, quantize_money, serialize_transaction, to_decimal
from ..services.pagination import paginate


def _sum(qs) -> str:
    total = qs.aggregate(total=Sum('commission_amount'))['total']
    return str(quantize_money(to_decimal(total or ZERO, 'total')))


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def transactions(request):
    if request.method == 'POST':
        s = TransactionCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        tx = commission.record_transaction(**s.validated_data)
        try:
            log_action(user=request.user, action='commission_record', object_type='commission_transaction',
                       object_id=tx.id, detail={'amount': str(tx.commission_amount)})
        except Exception:
            pass
        return Response({'ok': True, 'data': serialize_transaction(tx)}, status=status.HTTP_201_CREATED)

    q = TransactionListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    qs = CommissionTransaction.objects.order_by('-transaction_date')
    if v.get('payment_status'):
        qs = qs.filter(payment_status=v['payment_status'])
    if v.get('agreement_id'):
        qs = qs.filter(agreement_id=v['agreement_id'])
    if v.get('date_from'):
        qs = qs.filter(transaction_date__date__gte=v['date_from'])
    if v.get('date_to'):
        qs = qs.filter(transaction_date__date__lte=v['date_to'])
    return Response(paginate(qs, request.query_params, serialize_transaction))


@api_view(['GET', 'DELETE'])
@permission_classes([IsAuthenticated, IsAdminRole])
def transaction_detail(request, transaction_id: int):
    tx = get_object_or_404(CommissionTransaction, pk=transaction_id)
    if request.method == 'DELETE':
        commission.delete_transaction(tx)
        try:
            log_action(user=request.user, action='commission_delete', object_type='commission_transaction',
                       object_id=transaction_id)
        except Exception:
            pass
        return Response({'ok': True, 'message': 'Commission transaction deleted'})
    return Response({'ok': True, 'data': serialize_transaction(tx)})


@api_view(['PATCH'])
@permission_classes([IsAuthenticated, IsAdminRole])
def transaction_payment(request, transaction_id: int):
    tx = get_object_or_404(CommissionTransaction, pk=transaction_id)
    s = PaymentStatusSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    previous = tx.payment_status
    tx = commission.update_payment_status(tx, **s.validated_data)
    try:
        log_action(user=request.user, action='commission_payment', object_type='commission_transaction',
                   object_id=tx.id, detail={'from': previous, 'to': tx.payment_status})
    except Exception:
        pass
    return Response({'ok': True, 'data': serialize_transaction(tx)})


@api_view(['GET'])
@permission_classes([IsAuthenticated, IsAdminRole])
def agreement_transactions(request, agreement_id: int):
    agreement = get_object_or_404(CommissionAgreement, pk=agreement_id)
    qs = agreement.transactions.order_by('-transaction_date')
    payload = paginate(qs, request.query_params, serialize_transaction)
    payload['summary'] = {
        'total_commission': _sum(qs),
        'paid_commission': _sum(qs.filter(payment_status='paid')),
        'pending_commission': _sum(qs.filter(payment_status='pending')),
    }
    return Response(payload)
