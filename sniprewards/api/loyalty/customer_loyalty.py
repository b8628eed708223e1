from flask import Blueprint, jsonify, request, current_app, g
from sniprewards.exceptions import SnipRewardsError
from sniprewards.services import dashboard
from sniprewards.utils.auth import require_auth

loyalty_bp = Blueprint("loyalty", __name__, url_prefix="/api/loyalty")

MAX_RECENT_VISITS = 50


@loyalty_bp.route("/cards", methods=["GET"])
@require_auth("customer")
def get_loyalty_cards():
    """
    Current customer's loyalty cards
    ---
    tags:
      - Loyalty
    responses:
      200:
        description: One card per salon visited, with reward progress
        schema:
          type: object
          properties:
            cards:
              type: array
              items:
                $ref: '#/definitions/LoyaltyCard'
    """
    customer_id = g.current_profile.id
    try:
        return jsonify({"cards": dashboard.customer_cards(customer_id)}), 200
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Failed to get loyalty cards for customer {customer_id}: {e}")
        return jsonify({"status": "error", "message": "Failed to get loyalty cards", "details": str(e)}), 500


@loyalty_bp.route("/visits/recent", methods=["GET"])
@require_auth("customer")
def get_recent_visits():
    """
    Current customer's latest visits
    ---
    tags:
      - Loyalty
    parameters:
      - name: limit
        in: query
        type: integer
        required: false
        description: Number of visits to return (default 5, max 50)
    responses:
      200:
        description: Visits, most recent first
      400:
        description: Invalid limit
    """
    customer_id = g.current_profile.id
    limit = request.args.get(
        "limit", default=current_app.config.get("RECENT_VISITS_LIMIT", 5), type=int
    )
    if limit is None or limit <= 0 or limit > MAX_RECENT_VISITS:
        return jsonify({
            "status": "error",
            "message": f"limit must be between 1 and {MAX_RECENT_VISITS}"
        }), 400

    try:
        return jsonify({"visits": dashboard.recent_visits(customer_id, limit)}), 200
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Failed to get recent visits for customer {customer_id}: {e}")
        return jsonify({"status": "error", "message": "Failed to get recent visits", "details": str(e)}), 500
