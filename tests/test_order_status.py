"""Order status engine: strict auto-advance and permissive manual override."""
from datetime import timedelta
import pytest
from data.database.order_models import OrderStatus, RequestStatus
from src.services import order_status, returns
from src.services.notifications import NotificationTrigger
from src.utils.clock import as_utc, parse_timestamp
from src.utils.errors import InvalidTransitionError, NotFoundError, ValidationError
from tests.helpers import FakeDispatcher, T0


def test_advance_follows_processing_shipped_delivered(db, placed_order, notifier, dispatcher):
    assert placed_order.order_status == OrderStatus.PROCESSING

    shipped = order_status.advance(db, placed_order.id, notifier=notifier, now=T0 + timedelta(days=1))
    assert shipped.order_status == OrderStatus.SHIPPED
    assert shipped.delivered_at is None

    delivered = order_status.advance(db, placed_order.id, notifier=notifier, now=T0 + timedelta(days=3))
    assert delivered.order_status == OrderStatus.DELIVERED
    assert as_utc(delivered.delivered_at) == T0 + timedelta(days=3)
    assert dispatcher.types == ["order_shipped", "order_delivered"]


def test_advance_from_delivered_fails(db, placed_order):
    order_status.advance(db, placed_order.id)
    order_status.advance(db, placed_order.id)
    with pytest.raises(InvalidTransitionError) as exc:
        order_status.advance(db, placed_order.id)
    assert exc.value.detail == "Order already delivered"


@pytest.mark.parametrize("status", [OrderStatus.CANCELLED, OrderStatus.RETURNED, OrderStatus.REPLACE_APPROVED])
def test_advance_from_side_branch_fails(db, placed_order, status):
    order_status.set_status(db, placed_order.id, status)
    with pytest.raises(InvalidTransitionError):
        order_status.advance(db, placed_order.id)


def test_advance_missing_order(db):
    with pytest.raises(NotFoundError):
        order_status.advance(db, 404)


def test_manual_status_skips_transition_checks_on_purpose(db, placed_order):
    # Admin override: a processing order may jump straight to any status
    order = order_status.set_status(db, placed_order.id, OrderStatus.REPLACED)
    assert order.order_status == OrderStatus.REPLACED
    order = order_status.set_status(db, placed_order.id, "on_hold")
    assert order.order_status == "on_hold"
    order = order_status.set_status(db, placed_order.id, OrderStatus.PROCESSING)
    assert order.order_status == OrderStatus.PROCESSING


def test_manual_delivered_stamps_delivered_at_once(db, placed_order):
    first = T0 + timedelta(days=2)
    order = order_status.set_status(db, placed_order.id, "Delivered", now=first)
    assert as_utc(order.delivered_at) == first

    order = order_status.set_status(db, placed_order.id, "delivered", now=first + timedelta(days=5))
    assert as_utc(order.delivered_at) == first


def test_empty_status_is_rejected(db, placed_order):
    with pytest.raises(ValidationError):
        order_status.set_status(db, placed_order.id, "  ")


def test_statuses_without_template_send_nothing(db, placed_order, notifier, dispatcher):
    order_status.set_status(db, placed_order.id, OrderStatus.CANCELLED, notifier=notifier)
    assert dispatcher.sent == []


def test_failing_dispatcher_does_not_fail_the_transition(db, placed_order):
    notifier = NotificationTrigger(FakeDispatcher(fail=True))
    order = order_status.advance(db, placed_order.id, notifier=notifier)
    assert order.order_status == OrderStatus.SHIPPED


def test_manual_status_settles_filed_return(db, placed_order, customer, admin):
    delivered_at = T0 + timedelta(days=1)
    order_status.set_status(db, placed_order.id, OrderStatus.DELIVERED, now=delivered_at)
    returns.request_return(db, placed_order.id, customer.id, "Too small", "Sleeves too short",
                           now=delivered_at + timedelta(days=1))

    processed_at = delivered_at + timedelta(days=2)
    order = order_status.set_status(db, placed_order.id, OrderStatus.RETURN_APPROVED,
                                    processed_by=admin.id, now=processed_at)
    request = order.service_request("return")
    assert request["status"] == RequestStatus.APPROVED
    assert parse_timestamp(request["processedAt"]) == processed_at
    assert request["processedBy"] == admin.id

    order = order_status.set_status(db, placed_order.id, OrderStatus.RETURNED, processed_by=admin.id)
    assert order.return_request["status"] == RequestStatus.COMPLETED


def test_manual_status_leaves_unfiled_request_alone(db, placed_order, admin):
    order = order_status.set_status(db, placed_order.id, OrderStatus.REPLACE_REJECTED, processed_by=admin.id)
    assert order.replace_request["status"] == RequestStatus.NONE
    assert order.replace_request["processedAt"] is None


def test_advance_after_manual_correction_keeps_first_delivery_date(db, placed_order):
    first = T0 + timedelta(days=1)
    order_status.set_status(db, placed_order.id, OrderStatus.DELIVERED, now=first)
    order_status.set_status(db, placed_order.id, OrderStatus.SHIPPED)

    order = order_status.advance(db, placed_order.id, now=first + timedelta(days=5))
    assert order.order_status == OrderStatus.DELIVERED
    assert as_utc(order.delivered_at) == first
    assert not returns.can_request(order, returns.RETURN, first + timedelta(days=8))
