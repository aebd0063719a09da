from datetime import timedelta

import pytest

from fitdesk.application.services.otp_service import OTPService, generate_otp
from fitdesk.config import get_settings
from fitdesk.core.exceptions import (
    InvalidOTPError,
    OTPAttemptsExceededError,
    OTPCooldownError,
    OTPExpiredError,
)
from fitdesk.domain.models.otp import OTP, as_utc, utcnow
from fitdesk.infrastructure.repositories.otp_repository import SQLAlchemyOTPRepository

PHONE = "9876543210"


@pytest.fixture
def otp_service(db):
    return OTPService(SQLAlchemyOTPRepository(db, OTP), get_settings())


def _wrong(code):
    return "1000" if code != "1000" else "1001"


def test_generated_codes_are_four_digits():
    for _ in range(200):
        code = generate_otp(4)
        assert len(code) == 4
        assert 1000 <= int(code) <= 9999


def test_issue_sets_ten_minute_expiry(otp_service):
    now = utcnow()
    record = otp_service.issue(PHONE, now=now)
    assert record.identifier == PHONE
    assert record.attempts == 0
    assert record.is_verified is False
    assert not record.is_expired(now + timedelta(minutes=9, seconds=59))
    assert record.is_expired(now + timedelta(minutes=10, seconds=1))


def test_second_issue_within_cooldown_is_rejected(otp_service):
    otp_service.issue(PHONE)
    with pytest.raises(OTPCooldownError) as exc:
        otp_service.issue(PHONE)
    assert exc.value.status_code == 429
    assert exc.value.message == "Please wait 2 minute(s) before requesting a new OTP"


def test_cooldown_message_counts_whole_minutes(otp_service):
    otp_service.issue(PHONE)
    with pytest.raises(OTPCooldownError) as exc:
        otp_service.issue(PHONE, now=utcnow() + timedelta(minutes=1, seconds=30))
    assert exc.value.wait_minutes == 1


def test_issue_after_cooldown_replaces_unverified_code(db, otp_service):
    otp_service.issue(PHONE)
    second = otp_service.issue(PHONE, now=utcnow() + timedelta(minutes=3))

    pending = db.query(OTP).filter(OTP.identifier == PHONE, OTP.is_verified.is_(False)).all()
    assert pending == [second]


def test_cooldown_is_per_identifier(otp_service):
    otp_service.issue(PHONE)
    otp_service.issue("9123456789")


def test_verify_marks_code_used_once(otp_service):
    record = otp_service.issue(PHONE)
    code = record.otp

    verified = otp_service.verify(PHONE, code)
    assert verified.is_verified is True

    with pytest.raises(InvalidOTPError):
        otp_service.verify(PHONE, code)


def test_verify_without_issued_code_is_invalid(otp_service):
    with pytest.raises(InvalidOTPError) as exc:
        otp_service.verify(PHONE, "1234")
    assert exc.value.message == "Invalid OTP"
    assert exc.value.status_code == 400


def test_wrong_code_increments_attempts(db, otp_service):
    record = otp_service.issue(PHONE)
    with pytest.raises(InvalidOTPError):
        otp_service.verify(PHONE, _wrong(record.otp))

    db.refresh(record)
    assert record.attempts == 1


def test_three_failures_lock_out_the_correct_code(otp_service):
    record = otp_service.issue(PHONE)
    code = record.otp
    for _ in range(3):
        with pytest.raises(InvalidOTPError):
            otp_service.verify(PHONE, _wrong(code))

    with pytest.raises(OTPAttemptsExceededError) as exc:
        otp_service.verify(PHONE, code)
    assert exc.value.message == "Maximum attempts exceeded"


def test_expired_code_is_rejected(otp_service):
    now = utcnow()
    record = otp_service.issue(PHONE, now=now)

    with pytest.raises(OTPExpiredError) as exc:
        otp_service.verify(PHONE, record.otp, now=now + timedelta(minutes=11))
    assert exc.value.message == "OTP expired"


def test_new_code_resets_attempts(otp_service):
    record = otp_service.issue(PHONE)
    for _ in range(3):
        with pytest.raises(InvalidOTPError):
            otp_service.verify(PHONE, _wrong(record.otp))

    fresh = otp_service.issue(PHONE, now=utcnow() + timedelta(minutes=3))
    assert otp_service.verify(PHONE, fresh.otp).is_verified is True


def test_issue_stamps_record_with_the_given_clock(otp_service):
    earlier = utcnow() - timedelta(minutes=5)
    record = otp_service.issue(PHONE, now=earlier)
    assert as_utc(record.created_at) == earlier
    assert as_utc(record.expires_at) - as_utc(record.created_at) == timedelta(minutes=10)

    # Cooldown is measured from the same clock, so a code issued five minutes ago can be replaced
    otp_service.issue(PHONE)
