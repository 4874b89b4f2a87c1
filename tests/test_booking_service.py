"""Tests for booking creation, owner decisions, payment and rent updates."""

from datetime import date, timedelta

import pytest

from saknak.database.models import BookingRequest, Notification
from saknak.enums.payment_option import PaymentOption
from saknak.schemas.booking_schema import BookingRequestCreate, PaymentSubmission, RentUpdate
from saknak.services.booking_service import BookingService
from saknak.services.exceptions import (
    DuplicateBookingError,
    InvalidTransitionError,
    NotFoundError,
    PaymentWindowClosedError,
    PermissionDeniedError,
    ProfileIncompleteError,
)
from saknak.utils.date_helper import as_utc

from conftest import NOW

service = BookingService()


class TestCreate:
    def test_creates_pending_booking_with_payment_terms(self, db, student, listing):
        booking = service.create(
            db, student, BookingRequestCreate(property_id=listing.id, message="Hi"), now=NOW
        )

        assert booking.status == "pending"
        assert booking.owner_id == listing.owner_id
        assert booking.deposit_amount == 500.0
        assert booking.full_insurance_amount == 2500.0
        assert booking.vodafone_number == "01000000000"
        assert as_utc(booking.expires_at) == NOW + timedelta(minutes=60)
        assert booking.payment_status == "none"
        assert booking.payment_confirmed is False

    def test_incomplete_profile_is_rejected_before_any_write(self, db, make_user, listing):
        student = make_user(complete_profile=True, college="", level=None)

        with pytest.raises(ProfileIncompleteError) as exc_info:
            service.create(db, student, BookingRequestCreate(property_id=listing.id), now=NOW)

        assert exc_info.value.code == "profile_incomplete"
        assert exc_info.value.missing_fields == ["college", "level"]
        assert db.query(BookingRequest).count() == 0

    def test_second_pending_request_is_a_duplicate(self, db, student, listing):
        service.create(db, student, BookingRequestCreate(property_id=listing.id), now=NOW)

        with pytest.raises(DuplicateBookingError) as exc_info:
            service.create(db, student, BookingRequestCreate(property_id=listing.id), now=NOW)

        assert exc_info.value.code == "duplicate_booking"
        assert db.query(BookingRequest).count() == 1

    def test_concurrent_duplicate_is_caught_by_the_unique_slot(
        self, db, student, listing, monkeypatch
    ):
        service.create(db, student, BookingRequestCreate(property_id=listing.id), now=NOW)
        # A concurrent request that passed the pre-check before the first commit
        monkeypatch.setattr(service, "check_existing_pending", lambda *args: None)

        with pytest.raises(DuplicateBookingError) as exc_info:
            service.create(db, student, BookingRequestCreate(property_id=listing.id), now=NOW)

        assert exc_info.value.code == "duplicate_booking"
        assert db.query(BookingRequest).count() == 1

    def test_new_request_allowed_once_previous_is_decided(self, db, student, owner, listing):
        first = service.create(db, student, BookingRequestCreate(property_id=listing.id), now=NOW)
        service.decide(db, first.id, owner, "rejected", now=NOW)

        second = service.create(db, student, BookingRequestCreate(property_id=listing.id), now=NOW)

        assert second.id != first.id
        assert db.query(BookingRequest).count() == 2

    def test_unknown_property(self, db, student):
        with pytest.raises(NotFoundError):
            service.create(db, student, BookingRequestCreate(property_id=999), now=NOW)


class TestDecide:
    def test_accept_notifies_student(self, db, student, owner, listing, make_booking):
        booking = make_booking(student, listing)

        decided = service.decide(db, booking.id, owner, "accepted", now=NOW)

        assert decided.status == "accepted"
        assert decided.pending_slot is None
        notifications = db.query(Notification).filter_by(user_id=student.id).all()
        assert len(notifications) == 1
        assert notifications[0].title == "Booking Accepted"
        assert listing.title in notifications[0].body

    def test_second_decision_changes_nothing(self, db, student, owner, listing, make_booking):
        booking = make_booking(student, listing)
        service.decide(db, booking.id, owner, "rejected", now=NOW)

        with pytest.raises(InvalidTransitionError):
            service.decide(db, booking.id, owner, "accepted", now=NOW)

        db.expire_all()
        assert db.get(BookingRequest, booking.id).status == "rejected"
        assert db.query(Notification).count() == 1

    def test_only_the_owner_decides(self, db, student, make_user, listing, make_booking):
        booking = make_booking(student, listing)
        other_owner = make_user(user_type="owner")

        with pytest.raises(PermissionDeniedError):
            service.decide(db, booking.id, other_owner, "accepted", now=NOW)

    def test_expired_booking_cannot_be_accepted(self, db, student, owner, listing, make_booking):
        booking = make_booking(student, listing, status="expired")

        with pytest.raises(InvalidTransitionError):
            service.decide(db, booking.id, owner, "accepted", now=NOW)
        assert db.query(Notification).count() == 0


class TestRecordPayment:
    def test_payment_with_proof_confirms(self, db, student, listing, make_booking):
        booking = make_booking(student, listing)

        paid = service.record_payment(
            db,
            booking.id,
            student,
            PaymentSubmission(
                payment_option=PaymentOption.FULL_INSURANCE,
                payment_proof_url="https://files.example.com/receipt.png",
            ),
            now=NOW + timedelta(minutes=10),
        )

        assert paid.status == "pending"
        assert paid.payment_option == "full_insurance"
        assert paid.payment_status == "confirmed"
        assert paid.payment_confirmed is True

    def test_payment_without_proof_stays_unconfirmed(self, db, student, listing, make_booking):
        booking = make_booking(student, listing)

        paid = service.record_payment(
            db, booking.id, student, PaymentSubmission(), now=NOW + timedelta(minutes=10)
        )

        assert paid.payment_option == "deposit"
        assert paid.payment_status == "none"

    def test_payment_after_window(self, db, student, listing, make_booking):
        booking = make_booking(student, listing)

        with pytest.raises(PaymentWindowClosedError):
            service.record_payment(
                db, booking.id, student, PaymentSubmission(), now=NOW + timedelta(hours=2)
            )

    def test_only_the_requesting_student_pays(self, db, student, make_user, listing, make_booking):
        booking = make_booking(student, listing)
        someone_else = make_user()

        with pytest.raises(PermissionDeniedError):
            service.record_payment(db, booking.id, someone_else, PaymentSubmission(), now=NOW)


class TestRent:
    def test_owner_sets_due_date_on_accepted_booking(self, db, student, owner, listing, make_booking):
        booking = make_booking(student, listing, status="accepted")

        updated = service.update_rent(
            db, booking.id, owner, RentUpdate(rent_due_date=date(2025, 4, 1))
        )

        assert updated.rent_due_date == date(2025, 4, 1)
        assert updated.rent_paid_date is None

    def test_rent_requires_accepted_booking(self, db, student, owner, listing, make_booking):
        booking = make_booking(student, listing)

        with pytest.raises(InvalidTransitionError):
            service.update_rent(db, booking.id, owner, RentUpdate(rent_due_date=date(2025, 4, 1)))


class TestQueries:
    def test_lists_are_scoped_to_the_caller(self, db, student, make_user, owner, listing, make_booking):
        other_student = make_user()
        make_booking(student, listing)
        make_booking(other_student, listing)

        assert len(service.get_for_user(db, student)) == 1
        assert len(service.get_for_user(db, owner)) == 2
        assert service.pending_count_for_owner(db, owner.id) == 2

    def test_outsider_cannot_view(self, db, student, make_user, listing, make_booking):
        booking = make_booking(student, listing)

        with pytest.raises(PermissionDeniedError):
            service.get_accessible(db, booking.id, make_user())
