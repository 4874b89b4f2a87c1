"""Tests for the scheduled booking sweeps."""

from datetime import date, datetime, timedelta, timezone

from saknak.database.models import BookingReminder, BookingRequest, Notification, Rating
from saknak.services.booking_jobs import BookingJobs
from saknak.utils.date_helper import as_utc

from conftest import NOW

jobs = BookingJobs()


def reload(db, booking):
    db.expire_all()
    return db.get(BookingRequest, booking.id)


# ── Payment window ─────────────────────────────────────────────────


class TestExpireUnpaidBookings:
    def test_unpaid_booking_expires_after_window(self, db, student, listing, make_booking):
        booking = make_booking(student, listing, created_at=NOW)

        result = jobs.expire_unpaid_bookings(db, now=NOW + timedelta(hours=2))

        assert result == {"expiredCount": 1}
        assert reload(db, booking).status == "expired"

    def test_confirmed_payment_protects_booking(self, db, student, listing, make_booking):
        booking = make_booking(student, listing, created_at=NOW, payment_status="confirmed")

        result = jobs.expire_unpaid_bookings(db, now=NOW + timedelta(hours=2))

        assert result == {"expiredCount": 0}
        assert reload(db, booking).status == "pending"

    def test_open_window_is_left_alone(self, db, student, listing, make_booking):
        booking = make_booking(student, listing, created_at=NOW)

        result = jobs.expire_unpaid_bookings(db, now=NOW + timedelta(minutes=30))

        assert result == {"expiredCount": 0}
        assert reload(db, booking).status == "pending"

    def test_only_status_changes(self, db, student, listing, make_booking):
        booking = make_booking(student, listing, created_at=NOW, message="Is it quiet?")
        before = (
            booking.message,
            booking.deposit_amount,
            booking.vodafone_number,
            as_utc(booking.expires_at),
            booking.payment_status,
            as_utc(booking.created_at),
        )

        jobs.expire_unpaid_bookings(db, now=NOW + timedelta(hours=2))

        after = reload(db, booking)
        assert after.status == "expired"
        assert (
            after.message,
            after.deposit_amount,
            after.vodafone_number,
            as_utc(after.expires_at),
            after.payment_status,
            as_utc(after.created_at),
        ) == before

    def test_terminal_bookings_are_untouched(self, db, student, listing, make_booking):
        booking = make_booking(student, listing, status="accepted")

        jobs.expire_unpaid_bookings(db, now=NOW + timedelta(hours=2))

        assert reload(db, booking).status == "accepted"

    def test_second_run_is_a_no_op(self, db, student, listing, make_booking):
        make_booking(student, listing, created_at=NOW)
        later = NOW + timedelta(hours=2)

        jobs.expire_unpaid_bookings(db, now=later)
        result = jobs.expire_unpaid_bookings(db, now=later)

        assert result == {"expiredCount": 0}

    def test_no_notification_is_sent(self, db, student, listing, make_booking):
        make_booking(student, listing, created_at=NOW)

        jobs.expire_unpaid_bookings(db, now=NOW + timedelta(hours=2))

        assert db.query(Notification).count() == 0


# ── Stale requests ─────────────────────────────────────────────────


class TestExpireStaleBookings:
    def test_expires_and_notifies_student_once(self, db, student, make_user, listing, make_booking):
        stale = make_booking(student, listing, created_at=NOW - timedelta(days=8))
        fresh = make_booking(make_user(), listing, created_at=NOW - timedelta(days=2))

        result = jobs.expire_stale_bookings(db, now=NOW)

        assert result == {"expiredCount": 1, "notificationsSent": 1}
        assert reload(db, stale).status == "expired"
        assert reload(db, fresh).status == "pending"

        notifications = db.query(Notification).all()
        assert len(notifications) == 1
        assert notifications[0].user_id == student.id
        assert notifications[0].title == "Booking Expired"
        assert notifications[0].body == (
            f'Your booking request for "{listing.title}" has expired due to inactivity.'
        )

    def test_paid_stale_booking_still_expires(self, db, student, listing, make_booking):
        booking = make_booking(
            student, listing, created_at=NOW - timedelta(days=10), payment_status="confirmed"
        )

        result = jobs.expire_stale_bookings(db, now=NOW)

        assert result["expiredCount"] == 1
        assert reload(db, booking).status == "expired"

    def test_second_run_sends_nothing(self, db, student, listing, make_booking):
        make_booking(student, listing, created_at=NOW - timedelta(days=8))

        jobs.expire_stale_bookings(db, now=NOW)
        result = jobs.expire_stale_bookings(db, now=NOW)

        assert result == {"expiredCount": 0, "notificationsSent": 0}
        assert db.query(Notification).count() == 1

    def test_expired_slot_frees_student_to_book_again(self, db, student, listing, make_booking):
        booking = make_booking(student, listing, created_at=NOW - timedelta(days=8))

        jobs.expire_stale_bookings(db, now=NOW)

        assert reload(db, booking).pending_slot is None

    def test_notification_failure_keeps_the_sweep_going(
        self, db, student, make_user, listing, make_booking, monkeypatch
    ):
        from sqlalchemy.exc import OperationalError

        make_booking(student, listing, created_at=NOW - timedelta(days=8))
        make_booking(make_user(), listing, created_at=NOW - timedelta(days=9))
        calls = {"n": 0}
        original = jobs.notification_service.create

        def flaky_create(db, user_id, title, body, commit=True):
            calls["n"] += 1
            if calls["n"] == 1:
                raise OperationalError("INSERT", {}, Exception("store unavailable"))
            return original(db, user_id, title, body, commit=commit)

        monkeypatch.setattr(jobs.notification_service, "create", flaky_create)

        result = jobs.expire_stale_bookings(db, now=NOW)

        assert result == {"expiredCount": 2, "notificationsSent": 1}
        assert db.query(BookingRequest).filter_by(status="expired").count() == 2


# ── Rent reminders ─────────────────────────────────────────────────


class TestRentReminders:
    TODAY = date(2025, 3, 15)

    def test_reminder_five_days_ahead(self, db, student, listing, make_booking):
        make_booking(
            student, listing, status="accepted", rent_due_date=self.TODAY + timedelta(days=5)
        )

        result = jobs.send_rent_reminders(db, today=self.TODAY)

        assert result == {"bookingsChecked": 1, "notificationsSent": 1}
        notification = db.query(Notification).one()
        assert notification.user_id == student.id
        assert "due in 5 days" in notification.body
        assert "+10 points" in notification.body
        assert "Urgent" not in notification.title

    def test_overdue_notifies_student_and_owner(self, db, student, owner, listing, make_booking):
        make_booking(
            student, listing, status="accepted", rent_due_date=self.TODAY - timedelta(days=1)
        )

        result = jobs.send_rent_reminders(db, today=self.TODAY)

        assert result == {"bookingsChecked": 1, "notificationsSent": 2}
        recipients = sorted(n.user_id for n in db.query(Notification).all())
        assert recipients == sorted([student.id, owner.id])

    def test_due_today_and_tomorrow_are_urgent(self, db, student, make_user, listing, make_booking):
        make_booking(student, listing, status="accepted", rent_due_date=self.TODAY)
        make_booking(
            make_user(), listing, status="accepted", rent_due_date=self.TODAY + timedelta(days=1)
        )

        result = jobs.send_rent_reminders(db, today=self.TODAY)

        assert result["notificationsSent"] == 2
        bodies = sorted(n.body for n in db.query(Notification).all())
        assert bodies[0].endswith("is due today!")
        assert bodies[1].endswith("is due tomorrow!")

    def test_quiet_days_send_nothing(self, db, student, listing, make_booking):
        make_booking(
            student, listing, status="accepted", rent_due_date=self.TODAY + timedelta(days=3)
        )

        result = jobs.send_rent_reminders(db, today=self.TODAY)

        assert result == {"bookingsChecked": 1, "notificationsSent": 0}

    def test_paid_and_pending_bookings_are_skipped(self, db, student, make_user, listing, make_booking):
        make_booking(
            student,
            listing,
            status="accepted",
            rent_due_date=self.TODAY - timedelta(days=1),
            rent_paid_date=self.TODAY - timedelta(days=2),
        )
        make_booking(make_user(), listing, rent_due_date=self.TODAY - timedelta(days=1))

        result = jobs.send_rent_reminders(db, today=self.TODAY)

        assert result == {"bookingsChecked": 0, "notificationsSent": 0}

    def test_same_day_rerun_sends_nothing(self, db, student, listing, make_booking):
        make_booking(
            student, listing, status="accepted", rent_due_date=self.TODAY - timedelta(days=1)
        )

        jobs.send_rent_reminders(db, today=self.TODAY)
        result = jobs.send_rent_reminders(db, today=self.TODAY)

        assert result == {"bookingsChecked": 1, "notificationsSent": 0}
        assert db.query(Notification).count() == 2

    def test_next_day_reminds_again(self, db, student, listing, make_booking):
        make_booking(
            student, listing, status="accepted", rent_due_date=self.TODAY - timedelta(days=1)
        )

        jobs.send_rent_reminders(db, today=self.TODAY)
        result = jobs.send_rent_reminders(db, today=self.TODAY + timedelta(days=1))

        assert result["notificationsSent"] == 2
        assert db.query(BookingReminder).count() == 4


# ── Monthly rating reminders ───────────────────────────────────────


class TestRatingReminders:
    RUN_AT = datetime(2025, 4, 1, 9, 0, tzinfo=timezone.utc)

    def test_reminds_both_parties_and_opens_rating(self, db, student, owner, listing, make_booking):
        booking = make_booking(
            student, listing, status="accepted", created_at=datetime(2025, 3, 10, tzinfo=timezone.utc)
        )

        result = jobs.send_rating_reminders(db, now=self.RUN_AT)

        assert result == {"bookingsChecked": 1, "notificationsSent": 2}
        titles = {n.user_id: n.title for n in db.query(Notification).all()}
        assert titles == {student.id: "Rate Your Owner", owner.id: "Rate Your Tenant"}

        booking = reload(db, booking)
        assert booking.student_can_rate is True
        assert booking.owner_can_rate is True

    def test_skips_party_that_already_rated(self, db, student, owner, listing, make_booking):
        booking = make_booking(
            student, listing, status="accepted", created_at=datetime(2025, 3, 10, tzinfo=timezone.utc)
        )
        db.add(Rating(booking_id=booking.id, from_user=student.id, to_user=owner.id, stars=5))
        db.commit()

        result = jobs.send_rating_reminders(db, now=self.RUN_AT)

        assert result["notificationsSent"] == 1
        assert db.query(Notification).one().user_id == owner.id
        assert reload(db, booking).student_can_rate is False

    def test_only_last_calendar_month_counts(self, db, student, make_user, listing, make_booking):
        make_booking(
            student, listing, status="accepted", created_at=datetime(2025, 2, 27, tzinfo=timezone.utc)
        )
        make_booking(
            make_user(), listing, status="accepted", created_at=datetime(2025, 4, 1, tzinfo=timezone.utc)
        )

        result = jobs.send_rating_reminders(db, now=self.RUN_AT)

        assert result == {"bookingsChecked": 0, "notificationsSent": 0}

    def test_first_day_of_last_month_is_included(self, db, student, listing, make_booking):
        make_booking(
            student, listing, status="accepted", created_at=datetime(2025, 3, 1, tzinfo=timezone.utc)
        )

        result = jobs.send_rating_reminders(db, now=self.RUN_AT)

        assert result["bookingsChecked"] == 1

    def test_rerun_in_same_month_sends_nothing(self, db, student, listing, make_booking):
        make_booking(
            student, listing, status="accepted", created_at=datetime(2025, 3, 10, tzinfo=timezone.utc)
        )

        jobs.send_rating_reminders(db, now=self.RUN_AT)
        result = jobs.send_rating_reminders(db, now=self.RUN_AT + timedelta(days=6))

        assert result == {"bookingsChecked": 1, "notificationsSent": 0}
        assert db.query(Notification).count() == 2
