"""
Reviews, moderation and rating roll-up.

A review is created ``pending`` and becomes public once an administrator
approves it.  Doctors and hospitals carry a ``rating`` column that is
recomputed from their approved reviews whenever one is moderated, edited
or deleted.
"""
from __future__ import annotations

import logging
from decimal import Decimal
from typing import Optional

from django.db import transaction
from django.db.models import Avg, Count, F, Q
from django.http import Http404
from django.utils import timezone
from rest_framework.exceptions import PermissionDenied, ValidationError

from marketplace.models import Booking, Doctor, Hospital, Implant, Review, User
from marketplace.services.notifications import notify

logger = logging.getLogger(__name__)

REVIEWABLE_MODELS = {
    'doctor': Doctor,
    'hospital': Hospital,
    'implant_company': Implant,
    'booking_experience': Booking,
}

# entities whose ``rating`` column mirrors their approved reviews
RATED_MODELS = {
    'doctor': Doctor,
    'hospital': Hospital,
}

REVIEWER_ROLES = ('patient', 'doctor', 'hospital')

EDITABLE_FIELDS = ('rating', 'review_title', 'review_text', 'detailed_ratings', 'procedure_type',
                   'treatment_date', 'is_anonymous')

RATING_STEP = Decimal('0.01')


def ensure_reviewable(reviewable_type: str, reviewable_id: int):
    model = REVIEWABLE_MODELS.get(reviewable_type)
    if model is None:
        raise ValidationError({'reviewable_type': f'Unknown reviewable type: {reviewable_type}'})
    try:
        return model.objects.get(pk=reviewable_id)
    except model.DoesNotExist:
        raise Http404(f'{reviewable_type} {reviewable_id} not found')


def is_booking_party(user: User, booking: Booking) -> bool:
    """True when ``user`` is the patient, surgeon or hospital staff of ``booking``."""
    if booking.patient.user_id == user.id or booking.doctor.user_id == user.id:
        return True
    return booking.hospital.staff.filter(user=user).exists()


def visible_reviews(user: Optional[User]):
    """Reviews ``user`` may read: everything for admins, approved ones plus their own otherwise."""
    qs = Review.objects.select_related('reviewer')
    if user is not None and user.is_authenticated and user.role == 'admin':
        return qs
    if user is not None and user.is_authenticated:
        return qs.filter(Q(status='approved') | Q(reviewer=user))
    return qs.filter(status='approved')


def can_edit(user: User, review: Review) -> bool:
    return user.role == 'admin' or review.reviewer_id == user.id


def refresh_rating(reviewable_type: str, reviewable_id: int) -> Optional[Decimal]:
    model = RATED_MODELS.get(reviewable_type)
    if model is None:
        return None
    avg = (Review.objects.filter(reviewable_type=reviewable_type, reviewable_id=reviewable_id, status='approved')
           .aggregate(avg=Avg('rating'))['avg'])
    rating = Decimal(str(avg or 0)).quantize(RATING_STEP)
    model.objects.filter(pk=reviewable_id).update(rating=rating)
    return rating


def create_review(user: User, data: dict) -> Review:
    if user.role not in REVIEWER_ROLES:
        raise PermissionDenied('Only patients, doctors and hospitals can write reviews')
    data = dict(data)
    rtype, rid = data.pop('reviewable_type'), data.pop('reviewable_id')
    target = ensure_reviewable(rtype, rid)
    if (rtype == 'doctor' and target.user_id == user.id) or \
            (rtype == 'hospital' and target.staff.filter(user=user).exists()):
        raise PermissionDenied('You cannot review your own profile')
    booking_id = data.pop('booking_id', None)
    if rtype == 'booking_experience':
        booking_id = booking_id or target.pk
        if booking_id != target.pk:
            raise ValidationError({'booking_id': 'booking_id must match the reviewed booking'})
    booking = None
    if booking_id:
        booking = Booking.objects.select_related('patient', 'doctor', 'hospital').filter(pk=booking_id).first()
        if booking is None:
            raise Http404('Booking not found')
        if not is_booking_party(user, booking):
            raise PermissionDenied('You can only review bookings you took part in')
    review = Review.objects.create(
        reviewable_type=rtype, reviewable_id=rid, reviewer=user, reviewer_type=user.role,
        booking=booking, is_verified=booking is not None, status='pending', **data,
    )
    logger.info("Review %s created for %s %s by user %s", review.id, rtype, rid, user.id)
    return review


def update_review(review: Review, changes: dict) -> Review:
    """Apply reviewer edits; an edited review goes back to moderation."""
    with transaction.atomic():
        for field in EDITABLE_FIELDS:
            if field in changes:
                setattr(review, field, changes[field])
        was_approved = review.status == 'approved'
        review.status = 'pending'
        review.save()
        if was_approved:
            refresh_rating(review.reviewable_type, review.reviewable_id)
    return review


def delete_review(review: Review) -> None:
    rtype, rid, was_approved = review.reviewable_type, review.reviewable_id, review.status == 'approved'
    with transaction.atomic():
        review.delete()
        if was_approved:
            refresh_rating(rtype, rid)


def moderate(review_id: int, *, by: User, status: str, notes: str = '',
             is_featured: Optional[bool] = None) -> Review:
    with transaction.atomic():
        try:
            review = Review.objects.select_for_update().get(pk=review_id)
        except Review.DoesNotExist:
            raise Http404('Review not found')
        review.status = status
        review.moderation_notes = notes or ''
        review.moderated_by = by
        review.moderated_at = timezone.now()
        if is_featured is not None:
            review.is_featured = is_featured
        review.save()
        refresh_rating(review.reviewable_type, review.reviewable_id)
        notify(
            review.reviewer,
            title=f'Review {status}',
            message=f'Your review was {status} by a moderator.' + (f' Notes: {notes}' if notes else ''),
            type='success' if status == 'approved' else 'warning',
            category='review',
            metadata={'review_id': review.id},
        )
    logger.info("Review %s moderated to %s by user %s", review.id, status, by.id)
    return review


def mark_helpful(review: Review, *, is_helpful: bool) -> Review:
    counter = 'helpful_count' if is_helpful else 'not_helpful_count'
    Review.objects.filter(pk=review.pk).update(**{counter: F(counter) + 1})
    review.refresh_from_db(fields=['helpful_count', 'not_helpful_count'])
    return review


def entity_statistics(reviewable_type: str, reviewable_id: int) -> dict:
    qs = Review.objects.filter(reviewable_type=reviewable_type, reviewable_id=reviewable_id, status='approved')
    agg = qs.aggregate(total=Count('id'), avg=Avg('rating'))
    breakdown = {str(star): 0 for star in range(1, 6)}
    for row in qs.values('rating').annotate(n=Count('id')):
        breakdown[str(row['rating'])] = row['n']
    return {
        'total_reviews': agg['total'],
        'average_rating': str(Decimal(str(agg['avg'] or 0)).quantize(RATING_STEP)),
        'rating_breakdown': breakdown,
    }


def serialize_review(r: Review) -> dict:
    return {
        'id': r.id,
        'reviewable_type': r.reviewable_type,
        'reviewable_id': r.reviewable_id,
        'reviewer_id': None if r.is_anonymous else r.reviewer_id,
        'reviewer_type': r.reviewer_type,
        'booking_id': r.booking_id,
        'rating': r.rating,
        'review_title': r.review_title,
        'review_text': r.review_text,
        'detailed_ratings': r.detailed_ratings,
        'procedure_type': r.procedure_type,
        'treatment_date': r.treatment_date.isoformat() if r.treatment_date else None,
        'is_verified': r.is_verified,
        'is_anonymous': r.is_anonymous,
        'is_featured': r.is_featured,
        'status': r.status,
        'moderation_notes': r.moderation_notes,
        'moderated_at': r.moderated_at.isoformat() if r.moderated_at else None,
        'helpful_count': r.helpful_count,
        'not_helpful_count': r.not_helpful_count,
        'created_at': r.created_at.isoformat() if r.created_at else None,
    }
