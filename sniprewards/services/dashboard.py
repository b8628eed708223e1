"""Read-only dashboard queries for owners and customers."""

from decimal import Decimal

from sniprewards.exceptions import NotFound
from sniprewards.models import LoyaltyCard, Visit
from sniprewards.services import record_store


def salon_stats(owner_id: str) -> dict:
    """Totals for the owner's salon; zeros when no salon is registered."""
    try:
        salon = record_store.salon_by_owner(owner_id)
    except NotFound:
        return {
            "salon_id": None,
            "total_customers": 0,
            "total_visits": 0,
            "total_revenue": "0.00",
            "rewards_redeemed": 0,
        }

    revenue = Decimal(str(record_store.revenue_for_salon(salon.id) or 0))

    return {
        "salon_id": salon.id,
        "total_customers": record_store.card_count_for_salon(salon.id),
        "total_visits": record_store.visit_count_for_salon(salon.id),
        "total_revenue": str(revenue.quantize(Decimal("0.01"))),
        "rewards_redeemed": int(record_store.rewards_redeemed_for_salon(salon.id)),
    }


def card_progress(card: LoyaltyCard) -> dict:
    threshold = card.salon.loyalty_threshold
    progress = card.total_visits / threshold * 100 if threshold else 100
    return {
        "progress_percent": min(100, int(progress)),
        "visits_needed": max(0, threshold - card.total_visits),
        "reward_ready": card.total_visits >= threshold,
    }


def customer_cards(customer_id: str) -> list[dict]:
    response = []
    for card in record_store.cards_for_customer(customer_id):
        salon = card.salon
        item = card.to_dict()
        item["salon"] = {
            "name": salon.name,
            "address": salon.address,
            "loyalty_threshold": salon.loyalty_threshold,
            "reward_description": salon.reward_description,
        }
        item.update(card_progress(card))
        response.append(item)
    return response


def _visit_summary(visit: Visit) -> dict:
    item = visit.to_dict()
    item["salon_name"] = visit.salon.name if visit.salon else None
    item["barber_name"] = visit.barber.full_name if visit.barber else None
    return item


def recent_visits(customer_id: str, limit: int) -> list[dict]:
    return [
        _visit_summary(visit)
        for visit in record_store.visits_for_customer(customer_id, limit=limit)
    ]


def salon_visits(owner_id: str, limit: int) -> list[dict] | None:
    """Latest visits at the owner's salon, or None when there is no salon."""
    try:
        salon = record_store.salon_by_owner(owner_id)
    except NotFound:
        return None

    visits = []
    for visit in record_store.visits_for_salon(salon.id, limit=limit):
        item = _visit_summary(visit)
        item["customer_name"] = visit.customer.full_name if visit.customer else None
        visits.append(item)
    return visits
