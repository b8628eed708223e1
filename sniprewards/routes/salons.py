from flask import Blueprint, jsonify, request, current_app, g
from sniprewards.exceptions import SnipRewardsError
from sniprewards.extensions import db
from sniprewards.services import dashboard, record_store, salon_profile
from sniprewards.utils.auth import require_auth

salons_bp = Blueprint("salons", __name__, url_prefix="/api/salons")


@salons_bp.route("/mine", methods=["GET"])
@require_auth("salon_owner")
def get_my_salon():
    """
    Get the current owner's salon
    ---
    tags:
      - Salons
    responses:
      200:
        description: The owner's salon
        schema:
          $ref: '#/definitions/Salon'
      404:
        description: No salon registered yet
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        salon = salon_profile.get_salon(g.current_profile.id)
        if not salon:
            return jsonify({"status": "error", "message": "Salon not found"}), 404
        return jsonify(salon.to_dict()), 200
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Failed to get salon for owner {g.current_profile.id}: {e}")
        return jsonify({"status": "error", "message": "Failed to get salon", "details": str(e)}), 500


@salons_bp.route("/mine", methods=["PUT"])
@require_auth("salon_owner")
def save_my_salon():
    """
    Create or update the current owner's salon
    ---
    tags:
      - Salons
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            name:
              type: string
            address:
              type: string
            phone:
              type: string
            loyalty_threshold:
              type: integer
              example: 10
            reward_description:
              type: string
              example: Free haircut after 10 visits
    responses:
      200:
        description: Salon updated
      201:
        description: Salon created, QR payload generated
      400:
        description: Invalid fields
        schema:
          $ref: '#/definitions/Error'
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({
            "status": "error",
            "message": "JSON body with salon fields is required"
        }), 400

    try:
        salon, created = salon_profile.save_salon(g.current_profile.id, data)
        return jsonify({
            "status": "success",
            "message": "Salon created successfully!" if created else "Salon updated successfully!",
            "salon": salon.to_dict(),
        }), 201 if created else 200
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Failed to save salon for owner {g.current_profile.id}: {e}")
        return jsonify({"status": "error", "message": "Failed to save salon", "details": str(e)}), 500


@salons_bp.route("/mine/qr", methods=["GET"])
@require_auth("salon_owner")
def get_my_qr_code():
    """
    QR payload to display at the salon
    ---
    tags:
      - Salons
    responses:
      200:
        description: Check-in URL encoded in the salon's QR code
        schema:
          type: object
          properties:
            salon_id:
              type: string
            qr_code:
              type: string
              example: https://app.example/scan/1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed
      404:
        description: No salon registered yet
    """
    try:
        salon = salon_profile.get_salon(g.current_profile.id)
        if not salon:
            return jsonify({"status": "error", "message": "Salon not found"}), 404
        return jsonify({"salon_id": salon.id, "qr_code": salon.qr_code}), 200
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Failed to get QR code for owner {g.current_profile.id}: {e}")
        return jsonify({"status": "error", "message": "Failed to get QR code", "details": str(e)}), 500


@salons_bp.route("/mine/stats", methods=["GET"])
@require_auth("salon_owner")
def get_my_stats():
    """
    Loyalty stats for the owner's salon
    ---
    tags:
      - Dashboard
    responses:
      200:
        description: Totals across the salon's cards and visits
        schema:
          type: object
          properties:
            salon_id:
              type: string
            total_customers:
              type: integer
            total_visits:
              type: integer
            total_revenue:
              type: string
              example: "1250.50"
            rewards_redeemed:
              type: integer
    """
    try:
        return jsonify(dashboard.salon_stats(g.current_profile.id)), 200
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Failed to get stats for owner {g.current_profile.id}: {e}")
        return jsonify({"status": "error", "message": "Failed to get stats", "details": str(e)}), 500


@salons_bp.route("/mine/visits", methods=["GET"])
@require_auth("salon_owner")
def get_my_salon_visits():
    """
    Latest visits recorded at the owner's salon
    ---
    tags:
      - Dashboard
    parameters:
      - name: limit
        in: query
        type: integer
        required: false
        description: Number of visits to return (default 20, max 100)
    responses:
      200:
        description: Visits, most recent first, with customer and barber names
      400:
        description: Invalid limit
      404:
        description: No salon registered yet
    """
    limit = request.args.get("limit", default=20, type=int)
    if limit is None or not 0 < limit <= 100:
        return jsonify({"status": "error", "message": "limit must be between 1 and 100"}), 400

    try:
        visits = dashboard.salon_visits(g.current_profile.id, limit)
        if visits is None:
            return jsonify({"status": "error", "message": "Salon not found"}), 404
        return jsonify({"visits": visits}), 200
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Failed to get visits for owner {g.current_profile.id}: {e}")
        return jsonify({"status": "error", "message": "Failed to get salon visits", "details": str(e)}), 500


@salons_bp.route("/barbers", methods=["GET"])
@require_auth()
def list_barbers():
    """
    Barbers a customer can pick when recording a visit
    ---
    tags:
      - Salons
    responses:
      200:
        description: Barber profiles
    """
    try:
        barbers = record_store.profiles_with_role("barber")
        return jsonify({
            "barbers": [{"id": b.id, "full_name": b.full_name} for b in barbers]
        }), 200
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"Failed to list barbers: {e}")
        return jsonify({"status": "error", "message": "Failed to list barbers", "details": str(e)}), 500
