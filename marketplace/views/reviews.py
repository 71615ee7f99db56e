"""
Review endpoints.

Anyone may read approved reviews.  Patients, doctors and hospital staff
write them; administrators moderate.
"""
from __future__ import annotations

from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response

from ..models import Review
from ..permissions import IsAdminRole, ReadOnly, role_permission
from ..serializers.reviews import (
    ReviewCreateSerializer,
    ReviewHelpfulSerializer,
    ReviewListQuerySerializer,
    ReviewModerationSerializer,
    ReviewUpdateSerializer,
)
from ..services import reviews as review_service
from ..services.audit import log_action
from ..services.pagination import paginate
from ..services.reviews import serialize_review

IsReviewer = role_permission('patient', 'doctor', 'hospital')


def _denied():
    return Response({'ok': False, 'detail': 'Permission denied', 'error': 'permission_denied'},
                    status=status.HTTP_403_FORBIDDEN)


@api_view(['GET', 'POST'])
@permission_classes([ReadOnly | IsReviewer])
def reviews(request):
    if request.method == 'POST':
        s = ReviewCreateSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        review = review_service.create_review(request.user, s.validated_data)
        try:
            log_action(user=request.user, action='review_create', object_type='review', object_id=review.id)
        except Exception:
            pass
        return Response({'ok': True, 'message': 'Review submitted for moderation', 'data': serialize_review(review)},
                        status=status.HTTP_201_CREATED)

    q = ReviewListQuerySerializer(data=request.query_params)
    q.is_valid(raise_exception=True)
    v = q.validated_data
    qs = review_service.visible_reviews(request.user)
    is_admin = request.user.is_authenticated and request.user.role == 'admin'
    # the public listing shows approved reviews unless an admin asks otherwise
    qs = qs.filter(status=v['status'] if is_admin and v.get('status') else 'approved')
    if v.get('reviewable_type'):
        qs = qs.filter(reviewable_type=v['reviewable_type'])
    if v.get('reviewable_id'):
        qs = qs.filter(reviewable_id=v['reviewable_id'])
    if v.get('rating'):
        qs = qs.filter(rating=v['rating'])
    if v.get('is_featured') is not None:
        qs = qs.filter(is_featured=v['is_featured'])
    return Response(paginate(qs.order_by('-is_featured', '-created_at'), request.query_params, serialize_review))


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def my_reviews(request):
    qs = Review.objects.filter(reviewer=request.user).order_by('-created_at')
    return Response(paginate(qs, request.query_params, serialize_review))


@api_view(['GET'])
@permission_classes([AllowAny])
def entity_reviews(request, reviewable_type: str, reviewable_id: int):
    if reviewable_type not in review_service.REVIEWABLE_MODELS:
        return Response({'ok': False, 'detail': f'Unknown reviewable type: {reviewable_type}', 'error': 'invalid'},
                        status=status.HTTP_400_BAD_REQUEST)
    qs = (Review.objects.filter(reviewable_type=reviewable_type, reviewable_id=reviewable_id, status='approved')
          .order_by('-is_featured', '-created_at'))
    body = paginate(qs, request.query_params, serialize_review)
    body['statistics'] = review_service.entity_statistics(reviewable_type, reviewable_id)
    return Response(body)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
@permission_classes([ReadOnly | IsAuthenticated])
def review_detail(request, review_id: int):
    if request.method == 'GET':
        review = get_object_or_404(review_service.visible_reviews(request.user), pk=review_id)
        return Response({'ok': True, 'data': serialize_review(review)})

    review = get_object_or_404(Review, pk=review_id)
    if not review_service.can_edit(request.user, review):
        return _denied()
    if request.method == 'DELETE':
        review_service.delete_review(review)
        action = 'review_delete'
        body = {'ok': True, 'message': 'Review deleted'}
    else:
        s = ReviewUpdateSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        review = review_service.update_review(review, s.validated_data)
        action = 'review_update'
        body = {'ok': True, 'data': serialize_review(review)}
    try:
        log_action(user=request.user, action=action, object_type='review', object_id=review_id)
    except Exception:
        pass
    return Response(body)


@api_view(['POST'])
@permission_classes([IsAuthenticated, IsAdminRole])
def moderate_review(request, review_id: int):
    s = ReviewModerationSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    v = s.validated_data
    review = review_service.moderate(review_id, by=request.user, status=v['status'], notes=v['moderation_notes'],
                                     is_featured=v.get('is_featured'))
    try:
        log_action(user=request.user, action='review_moderate', object_type='review', object_id=review.id,
                   detail={'status': review.status})
    except Exception:
        pass
    return Response({'ok': True, 'data': serialize_review(review)})


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def helpful_review(request, review_id: int):
    review = get_object_or_404(Review, pk=review_id, status='approved')
    s = ReviewHelpfulSerializer(data=request.data)
    s.is_valid(raise_exception=True)
    review = review_service.mark_helpful(review, is_helpful=s.validated_data['is_helpful'])
    return Response({'ok': True, 'data': {'helpful_count': review.helpful_count,
                                          'not_helpful_count': review.not_helpful_count}})
