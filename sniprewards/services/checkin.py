"""Visit check-in service - salon resolution, card upsert, points accrual.

The visit insert and the card mutation share one transaction: either both
are committed or neither is.
"""

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import ROUND_FLOOR, Decimal, InvalidOperation

from flask import current_app
from sqlalchemy import update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sniprewards.exceptions import (
    CheckinError,
    NotFound,
    SnipRewardsError,
    StoreError,
    ValidationError,
)
from sniprewards.extensions import db
from sniprewards.models import LoyaltyCard, Salon, Visit
from sniprewards.services import record_store

CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")


@dataclass
class VisitForm:
    """Validated visit form."""

    service_type: str
    amount: Decimal
    barber_id: str | None = None


@dataclass
class CheckinResult:
    visit: Visit
    card: LoyaltyCard
    points_earned: int
    card_created: bool


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise InvalidOperation
    if isinstance(value, float):
        if not math.isfinite(value):
            raise InvalidOperation
        value = repr(value)
    if isinstance(value, str):
        value = value.strip()
    return Decimal(value)


def points_earned(amount) -> int:
    """One point per whole dollar: floor(amount). Amounts below 1 earn 0."""
    amount = _to_decimal(amount)
    if not amount.is_finite() or amount < 0:
        raise ValueError(f"amount must be a non-negative number, got {amount}")
    return int(amount.to_integral_value(rounding=ROUND_FLOOR))


def validate_visit_form(form: dict) -> VisitForm:
    """
    Check the visit form locally.

    Raises:
        ValidationError: service type empty, amount missing, negative,
            non-numeric or finer than cents
    """
    form = form or {}

    service_type = form.get("service_type")
    if not isinstance(service_type, str) or not service_type.strip():
        raise ValidationError("Service type is required", field="service_type")

    raw_amount = form.get("amount")
    if raw_amount is None or raw_amount == "":
        raise ValidationError("Amount is required", field="amount")
    try:
        amount = _to_decimal(raw_amount)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError("Amount must be a number", field="amount")
    if not amount.is_finite():
        raise ValidationError("Amount must be a number", field="amount")
    if amount < 0:
        raise ValidationError("Amount cannot be negative", field="amount")
    if amount > MAX_AMOUNT:
        raise ValidationError("Amount is too large", field="amount")
    if amount != amount.quantize(CENT):
        raise ValidationError("Amount cannot have more than two decimals", field="amount")

    barber_id = form.get("barber_id") or None
    if barber_id is not None and not isinstance(barber_id, str):
        raise ValidationError("Barber id must be a string", field="barber_id")

    return VisitForm(
        service_type=service_type.strip(),
        amount=amount.quantize(CENT),
        barber_id=barber_id,
    )


def resolve_salon_by_owner(owner_id: str) -> Salon:
    """
    Look up the salon a QR code points at.

    Raises:
        NotFound: no salon for this owner
        StoreError: any other store failure
    """
    return record_store.salon_by_owner(owner_id)


def resolve_or_create_card(
    customer_id: str,
    salon_id: str,
    visits: int = 0,
    points: int = 0,
) -> tuple[LoyaltyCard, bool]:
    """
    Return the customer's card for this salon, creating it if absent.

    A new card starts at the given counters (zeros unless a visit is being
    recorded). Only "no rows" leads to creation; any other lookup failure
    propagates. The insert runs in a savepoint so a concurrent creator
    hitting the unique (customer, salon) index falls back to the winner's
    card.

    Returns:
        Tuple of (LoyaltyCard, created: bool)
    """
    try:
        return record_store.card_for(customer_id, salon_id), False
    except NotFound:
        pass

    card = LoyaltyCard(
        customer_id=customer_id,
        salon_id=salon_id,
        total_visits=visits,
        total_points=points,
        rewards_redeemed=0,
    )
    try:
        with db.session.begin_nested():
            db.session.add(card)
    except IntegrityError:
        current_app.logger.info(
            f"Loyalty card for customer {customer_id}, salon {salon_id} "
            "created concurrently; using existing card"
        )
        return record_store.card_for(customer_id, salon_id), False
    except SQLAlchemyError as e:
        raise StoreError(reason=str(e))

    return card, True


def _validate_barber(barber_id: str) -> None:
    try:
        barber = record_store.profile_by_id(barber_id)
    except NotFound:
        raise ValidationError("Unknown barber", field="barber_id")
    if barber.role != "barber":
        raise ValidationError("Unknown barber", field="barber_id")


def check_in(customer_id: str, owner_id: str, form) -> CheckinResult:
    """
    Record a paid visit and accrue it on the customer's loyalty card.

    Args:
        customer_id: Authenticated customer's profile id
        owner_id: Salon owner identity decoded from the QR payload
        form: Raw form dict or an already validated VisitForm

    Returns:
        CheckinResult

    Raises:
        ValidationError: form rejected (nothing read or written)
        CheckinError(UNKNOWN_SALON): no salon for owner_id (nothing written)
        CheckinError(WRITE_FAILED): visit or card write failed (rolled back)
        StoreError: salon lookup failed, or the card could not be reloaded
            after the visit was committed
    """
    if not isinstance(form, VisitForm):
        form = validate_visit_form(form)

    try:
        salon = resolve_salon_by_owner(owner_id)
    except NotFound:
        raise CheckinError(CheckinError.UNKNOWN_SALON, owner_id=owner_id)

    if form.barber_id:
        _validate_barber(form.barber_id)

    salon_id = salon.id
    points = points_earned(form.amount)
    now = _now()

    try:
        visit = Visit(
            customer_id=customer_id,
            salon_id=salon_id,
            barber_id=form.barber_id,
            service_type=form.service_type,
            amount=form.amount,
            points_earned=points,
            visit_date=now,
        )
        db.session.add(visit)
        db.session.flush()
        visit_id = visit.id

        card, created = resolve_or_create_card(
            customer_id, salon_id, visits=1, points=points
        )
        card_id = card.id
        if not created:
            db.session.execute(
                update(LoyaltyCard)
                .where(LoyaltyCard.id == card_id)
                .values(
                    total_visits=LoyaltyCard.total_visits + 1,
                    total_points=LoyaltyCard.total_points + points,
                    updated_at=now,
                )
            )

        db.session.commit()
    except (SnipRewardsError, SQLAlchemyError) as e:
        db.session.rollback()
        current_app.logger.error(
            f"Check-in failed for customer {customer_id} at salon {salon_id}: {e}"
        )
        raise CheckinError(CheckinError.WRITE_FAILED, salon_id=salon_id) from e

    # The visit is committed at this point; only the returned card is stale
    try:
        db.session.refresh(card)
    except SQLAlchemyError as e:
        current_app.logger.error(
            f"Visit {visit_id} recorded but card {card_id} could not be reloaded: {e}"
        )
        raise StoreError(
            message="Visit recorded but the loyalty card could not be loaded",
            reason=str(e),
        )

    current_app.logger.info(
        f"Visit {visit_id} recorded for customer {customer_id} at salon {salon_id}: "
        f"+{points} points"
    )
    return CheckinResult(
        visit=visit, card=card, points_earned=points, card_created=created
    )
