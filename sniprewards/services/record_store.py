"""
Record store boundary.

Every query the loyalty flows issue goes through here so that callers only
ever see three outcomes: rows, ``NotFound`` for an empty single-row lookup,
or ``StoreError`` for anything else.
"""

from flask import current_app
from sqlalchemy import func, select
from sqlalchemy.exc import MultipleResultsFound, NoResultFound, SQLAlchemyError

from sniprewards.exceptions import NotFound, StoreError
from sniprewards.extensions import db
from sniprewards.models import LoyaltyCard, Profile, Salon, Visit


def fetch_one(stmt, code: str = "NOT_FOUND", **details):
    """Single-row-or-none query; zero rows raise ``NotFound``."""
    try:
        return db.session.scalars(stmt).one()
    except NoResultFound:
        raise NotFound(code, **details)
    except MultipleResultsFound as e:
        current_app.logger.error(f"Expected a single row for {details}: {e}")
        raise StoreError(reason="multiple rows", **details)
    except SQLAlchemyError as e:
        current_app.logger.error(f"Store read failed for {details}: {e}")
        raise StoreError(reason=str(e))


def fetch_all(stmt) -> list:
    try:
        return list(db.session.scalars(stmt).all())
    except SQLAlchemyError as e:
        current_app.logger.error(f"Store read failed: {e}")
        raise StoreError(reason=str(e))


def fetch_scalar(stmt):
    try:
        return db.session.scalar(stmt)
    except SQLAlchemyError as e:
        current_app.logger.error(f"Store aggregate failed: {e}")
        raise StoreError(reason=str(e))


# profiles


def profile_by_id(profile_id: str) -> Profile:
    return fetch_one(
        select(Profile).where(Profile.id == profile_id),
        "PROFILE_NOT_FOUND",
        profile_id=profile_id,
    )


def profiles_with_role(role: str) -> list[Profile]:
    return fetch_all(
        select(Profile).where(Profile.role == role).order_by(Profile.full_name)
    )


# salons


def salon_by_owner(owner_id: str) -> Salon:
    return fetch_one(
        select(Salon).where(Salon.owner_id == owner_id),
        "SALON_NOT_FOUND",
        owner_id=owner_id,
    )


# visits


def visits_for_customer(customer_id: str, limit: int | None = None) -> list[Visit]:
    stmt = (
        select(Visit)
        .where(Visit.customer_id == customer_id)
        .order_by(Visit.visit_date.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return fetch_all(stmt)


def visits_for_salon(salon_id: str, limit: int | None = None) -> list[Visit]:
    stmt = (
        select(Visit)
        .where(Visit.salon_id == salon_id)
        .order_by(Visit.visit_date.desc())
    )
    if limit is not None:
        stmt = stmt.limit(limit)
    return fetch_all(stmt)


def visit_count_for_salon(salon_id: str) -> int:
    return fetch_scalar(
        select(func.count(Visit.id)).where(Visit.salon_id == salon_id)
    ) or 0


def revenue_for_salon(salon_id: str):
    return fetch_scalar(
        select(func.coalesce(func.sum(Visit.amount), 0)).where(
            Visit.salon_id == salon_id
        )
    )


# loyalty cards


def card_for(customer_id: str, salon_id: str) -> LoyaltyCard:
    return fetch_one(
        select(LoyaltyCard)
        .where(LoyaltyCard.customer_id == customer_id)
        .where(LoyaltyCard.salon_id == salon_id),
        "CARD_NOT_FOUND",
        customer_id=customer_id,
        salon_id=salon_id,
    )


def cards_for_customer(customer_id: str) -> list[LoyaltyCard]:
    return fetch_all(
        select(LoyaltyCard)
        .where(LoyaltyCard.customer_id == customer_id)
        .order_by(LoyaltyCard.updated_at.desc())
    )


def card_count_for_salon(salon_id: str) -> int:
    return fetch_scalar(
        select(func.count(LoyaltyCard.id)).where(LoyaltyCard.salon_id == salon_id)
    ) or 0


def rewards_redeemed_for_salon(salon_id: str) -> int:
    return fetch_scalar(
        select(func.coalesce(func.sum(LoyaltyCard.rewards_redeemed), 0)).where(
            LoyaltyCard.salon_id == salon_id
        )
    ) or 0
