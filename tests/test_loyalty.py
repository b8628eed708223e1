import pytest
import json

from sniprewards.models import LoyaltyCard
from sniprewards.services import checkin, dashboard, salon_profile


def record(customer, owner, amount, service="Haircut", barber=None):
    form = {"service_type": service, "amount": amount}
    if barber is not None:
        form["barber_id"] = barber.id
    return checkin.check_in(customer.id, owner.id, form)


@pytest.mark.loyalty
class TestLoyaltyCards:
    """Test suite for the customer's loyalty cards."""

    def test_no_cards(self, client, customer_headers):
        response = client.get("/api/loyalty/cards", headers=customer_headers)

        assert response.status_code == 200
        assert json.loads(response.data)["cards"] == []

    def test_card_with_progress(self, client, sample_customer, sample_owner, sample_salon, customer_headers):
        for amount in ("25.00", "9.50", "30"):
            record(sample_customer, sample_owner, amount)

        response = client.get("/api/loyalty/cards", headers=customer_headers)

        assert response.status_code == 200
        cards = json.loads(response.data)["cards"]
        assert len(cards) == 1
        card = cards[0]
        assert card["salon_id"] == sample_salon.id
        assert card["salon"]["name"] == "Test Salon"
        assert card["salon"]["reward_description"] == "Free haircut"
        assert card["total_visits"] == 3
        assert card["total_points"] == 64
        assert card["progress_percent"] == 30
        assert card["visits_needed"] == 7
        assert card["reward_ready"] is False

    def test_cards_across_salons(self, client, make_profile, sample_customer, sample_owner, sample_salon, customer_headers):
        other_owner = make_profile("corner@example.com", "salon_owner", "Corner Owner")
        salon_profile.save_salon(
            other_owner.id,
            {"name": "Corner Barbers", "address": "2 Elm St", "phone": "555-0111"},
        )
        record(sample_customer, sample_owner, 10)
        record(sample_customer, other_owner, 20)

        response = client.get("/api/loyalty/cards", headers=customer_headers)

        cards = json.loads(response.data)["cards"]
        assert {card["salon"]["name"] for card in cards} == {"Test Salon", "Corner Barbers"}

    def test_only_own_cards(self, client, make_profile, sample_customer, sample_owner, sample_salon, headers_for):
        record(sample_customer, sample_owner, 10)
        stranger = make_profile("stranger@example.com", "customer", "Stranger")

        response = client.get("/api/loyalty/cards", headers=headers_for(stranger))

        assert json.loads(response.data)["cards"] == []

    def test_owner_cannot_list_cards(self, client, owner_headers):
        response = client.get("/api/loyalty/cards", headers=owner_headers)

        assert response.status_code == 403


@pytest.mark.loyalty
class TestCardProgress:
    def test_progress_caps_at_threshold(self, db, sample_customer, sample_salon):
        card = LoyaltyCard(
            customer_id=sample_customer.id,
            salon_id=sample_salon.id,
            total_visits=12,
            total_points=300,
            rewards_redeemed=0,
        )
        db.session.add(card)
        db.session.commit()

        progress = dashboard.card_progress(card)

        assert progress == {
            "progress_percent": 100,
            "visits_needed": 0,
            "reward_ready": True,
        }

    def test_progress_exactly_at_threshold(self, db, sample_customer, sample_salon):
        card = LoyaltyCard(
            customer_id=sample_customer.id,
            salon_id=sample_salon.id,
            total_visits=10,
            total_points=10,
            rewards_redeemed=0,
        )
        db.session.add(card)
        db.session.commit()

        assert dashboard.card_progress(card)["reward_ready"] is True


@pytest.mark.loyalty
class TestRecentVisits:
    """Test suite for the customer's visit history."""

    def test_recent_visits_newest_first(self, client, sample_customer, sample_owner, sample_salon, sample_barber, customer_headers):
        record(sample_customer, sample_owner, 10, service="Cut")
        record(sample_customer, sample_owner, 20, service="Shave", barber=sample_barber)

        response = client.get("/api/loyalty/visits/recent", headers=customer_headers)

        assert response.status_code == 200
        visits = json.loads(response.data)["visits"]
        assert [v["service_type"] for v in visits] == ["Shave", "Cut"]
        assert visits[0]["salon_name"] == "Test Salon"
        assert visits[0]["barber_name"] == "Bob Barber"
        assert visits[1]["barber_name"] is None

    def test_recent_visits_default_limit(self, client, sample_customer, sample_owner, sample_salon, customer_headers):
        for i in range(7):
            record(sample_customer, sample_owner, 10 + i, service=f"Visit {i}")

        response = client.get("/api/loyalty/visits/recent", headers=customer_headers)

        visits = json.loads(response.data)["visits"]
        assert len(visits) == 5
        assert visits[0]["service_type"] == "Visit 6"

    def test_recent_visits_custom_limit(self, client, sample_customer, sample_owner, sample_salon, customer_headers):
        for i in range(3):
            record(sample_customer, sample_owner, 10)

        response = client.get("/api/loyalty/visits/recent?limit=2", headers=customer_headers)

        assert len(json.loads(response.data)["visits"]) == 2

    @pytest.mark.parametrize("limit", ["0", "-1", "51"])
    def test_recent_visits_invalid_limit(self, client, customer_headers, limit):
        response = client.get(f"/api/loyalty/visits/recent?limit={limit}", headers=customer_headers)

        assert response.status_code == 400
        assert json.loads(response.data)["status"] == "error"
