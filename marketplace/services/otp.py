"""
One-time password issuance and verification.

Codes are six random digits from :mod:`secrets`.  Issuance is limited
per phone number / e-mail address over a short sliding window, and each
code allows a bounded number of verification attempts.  Delivery goes
through the log only; codes never appear in log lines.
"""
from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Optional

from django.conf import settings
from django.db import transaction
from django.db.models import Q
from django.utils import timezone
from rest_framework.exceptions import ValidationError

from marketplace.exceptions import RateLimited
from marketplace.models import OtpLog, User

logger = logging.getLogger(__name__)


def generate_code(length: Optional[int] = None) -> str:
    length = length or settings.OTP_LENGTH
    return ''.join(secrets.choice('0123456789') for _ in range(length))


def _mask(phone: str, email: str) -> str:
    if phone:
        return '*' * max(len(phone) - 4, 0) + phone[-4:]
    if '@' in email:
        local, domain = email.split('@', 1)
        return (local[:1] + '***@' + domain) if local else '***@' + domain
    return '***'


def _contact_filter(phone: str, email: str) -> Q:
    q = Q()
    if phone:
        q |= Q(phone=phone)
    if email:
        q |= Q(email=email)
    return q


def recent_count(phone: str, email: str) -> int:
    since = timezone.now() - timedelta(minutes=settings.OTP_RATE_LIMIT_WINDOW_MINUTES)
    return OtpLog.objects.filter(
        _contact_filter(phone, email), created_at__gte=since, status__in=('sent', 'verified')
    ).count()


def deliver(otp: OtpLog) -> None:
    # TODO: hand off to an SMS / e-mail gateway once a provider is chosen
    logger.info("OTP %s for %s sent via %s to %s", otp.id, otp.otp_type, otp.delivery_method,
                _mask(otp.phone, otp.email))


def issue(*, otp_type: str, delivery_method: str, phone: str = '', email: str = '',
          user: Optional[User] = None, expires_in_minutes: Optional[int] = None,
          ip_address: Optional[str] = None, user_agent: str = '') -> OtpLog:
    phone = (phone or '').strip()
    email = (email or '').strip().lower()
    if delivery_method in ('sms', 'whatsapp') and not phone:
        raise ValidationError({'phone': f'phone is required for {delivery_method} delivery'})
    if delivery_method == 'email' and not email:
        raise ValidationError({'email': 'email is required for email delivery'})

    if recent_count(phone, email) >= settings.OTP_RATE_LIMIT_COUNT:
        logger.warning("OTP rate limit hit for %s", _mask(phone, email))
        raise RateLimited('Too many OTP requests. Please wait a few minutes before trying again.')

    minutes = expires_in_minutes or settings.OTP_DEFAULT_EXPIRY_MINUTES
    otp = OtpLog.objects.create(
        user=user,
        phone=phone,
        email=email,
        otp_code=generate_code(),
        otp_type=otp_type,
        delivery_method=delivery_method,
        max_attempts=settings.OTP_MAX_ATTEMPTS,
        expires_at=timezone.now() + timedelta(minutes=minutes),
        ip_address=ip_address,
        user_agent=user_agent or '',
    )
    deliver(otp)
    return otp


def verify(*, otp_code: str, otp_type: str, phone: str = '', email: str = '') -> OtpLog:
    """Check ``otp_code`` against the newest live OTP for the contact.

    Raises ``ValidationError`` when there is no live code, attempts are
    exhausted or the code does not match.
    """
    phone = (phone or '').strip()
    email = (email or '').strip().lower()
    if not phone and not email:
        raise ValidationError({'detail': 'phone or email is required'})

    error = None
    with transaction.atomic():
        otp = (OtpLog.objects.select_for_update()
               .filter(_contact_filter(phone, email), otp_type=otp_type, status='sent',
                       expires_at__gt=timezone.now())
               .order_by('-created_at')
               .first())
        if otp is None:
            error = 'Invalid or expired OTP'
        elif otp.attempts >= otp.max_attempts:
            otp.status = 'failed'
            otp.save(update_fields=['status'])
            error = 'Maximum verification attempts exceeded'
        elif not secrets.compare_digest(otp.otp_code, str(otp_code)):
            otp.attempts += 1
            if otp.attempts >= otp.max_attempts:
                otp.status = 'failed'
            otp.save(update_fields=['attempts', 'status'])
            error = f'Invalid OTP. {max(otp.max_attempts - otp.attempts, 0)} attempt(s) remaining'
        else:
            otp.status = 'verified'
            otp.verified_at = timezone.now()
            otp.save(update_fields=['status', 'verified_at'])
            if otp.otp_type == 'email_verification' and otp.user_id:
                User.objects.filter(pk=otp.user_id).update(email_verified=True)
    # raised outside the block so failed attempts stay recorded
    if error:
        raise ValidationError({'detail': error})
    logger.info("OTP %s verified", otp.id)
    return otp


def cleanup(now=None) -> dict:
    now = now or timezone.now()
    expired = OtpLog.objects.filter(status='sent', expires_at__lt=now).update(status='expired')
    deleted, _ = OtpLog.objects.filter(created_at__lt=now - timedelta(days=settings.OTP_RETENTION_DAYS)).delete()
    return {'expired': expired, 'deleted': deleted}


def serialize_otp(o: OtpLog) -> dict:
    return {
        'id': o.id,
        'user_id': o.user_id,
        'phone': o.phone,
        'email': o.email,
        'otp_type': o.otp_type,
        'delivery_method': o.delivery_method,
        'status': o.status,
        'attempts': o.attempts,
        'max_attempts': o.max_attempts,
        'expires_at': o.expires_at.isoformat() if o.expires_at else None,
        'verified_at': o.verified_at.isoformat() if o.verified_at else None,
        'ip_address': o.ip_address,
        'created_at': o.created_at.isoformat() if o.created_at else None,
    }
