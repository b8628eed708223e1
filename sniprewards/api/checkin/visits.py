from flask import Blueprint, jsonify, request, current_app, g
from sniprewards.exceptions import (
    CheckinError,
    DecodeError,
    NotFound,
    SnipRewardsError,
    ValidationError,
)
from sniprewards.extensions import db
from sniprewards.services import checkin, record_store
from sniprewards.utils import qr_codec
from sniprewards.utils.auth import require_auth

checkin_bp = Blueprint("checkin", __name__, url_prefix="/api/checkin")


def owner_from_request(data):
    """Owner identity from a scanned payload, or an explicit owner_id."""
    payload = data.get("payload")
    if payload is not None:
        return qr_codec.decode(payload)
    owner_id = data.get("owner_id")
    if not isinstance(owner_id, str) or not owner_id.strip():
        raise ValidationError("payload or owner_id is required", field="payload")
    return owner_id.strip()


@checkin_bp.route("/scan", methods=["POST"])
@require_auth("customer")
def scan_salon_qr():
    """
    Resolve a scanned QR payload to the salon and its barbers
    ---
    tags:
      - Check-in
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            payload:
              type: string
              example: https://app.example/scan/1b9d6bcd-bbfd-4b2d-9b5d-ab8dfbbd4bed
    responses:
      200:
        description: Salon to record the visit against
      400:
        description: Invalid QR code
        schema:
          $ref: '#/definitions/Error'
      404:
        description: Salon not found
        schema:
          $ref: '#/definitions/Error'
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    try:
        owner_id = qr_codec.decode(data.get("payload"))
        salon = checkin.resolve_salon_by_owner(owner_id)
        barbers = record_store.profiles_with_role("barber")
        return jsonify({
            "status": "success",
            "salon": salon.to_dict(),
            "barbers": [{"id": b.id, "full_name": b.full_name} for b in barbers],
        }), 200
    except DecodeError as e:
        # Per-frame scan noise; the client goes back to scanning
        current_app.logger.info(f"QR decode failed ({e.reason}): {data.get('payload')!r}")
        return jsonify(e.to_dict()), e.status_code
    except NotFound:
        err = CheckinError(CheckinError.UNKNOWN_SALON)
        return jsonify(err.to_dict()), err.status_code
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        current_app.logger.error(f"QR scan failed for customer {g.current_profile.id}: {e}")
        return jsonify({"status": "error", "message": "Failed to resolve salon", "details": str(e)}), 500


@checkin_bp.route("", methods=["POST"])
@require_auth("customer")
def record_visit():
    """
    Record a visit and accrue loyalty points
    ---
    tags:
      - Check-in
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [service_type, amount]
          properties:
            payload:
              type: string
              description: Scanned QR payload
            owner_id:
              type: string
              description: Salon owner identity, when already decoded
            service_type:
              type: string
              example: Haircut
            amount:
              type: number
              example: 25.00
            barber_id:
              type: string
    responses:
      201:
        description: Visit recorded
        schema:
          type: object
          properties:
            status:
              type: string
            message:
              type: string
            points_earned:
              type: integer
            card_created:
              type: boolean
            visit:
              $ref: '#/definitions/Visit'
            card:
              $ref: '#/definitions/LoyaltyCard'
      400:
        description: Invalid form or QR code
        schema:
          $ref: '#/definitions/Error'
      404:
        description: Unknown salon
        schema:
          $ref: '#/definitions/Error'
      500:
        description: Visit could not be recorded; nothing was written
        schema:
          $ref: '#/definitions/Error'
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return jsonify({"status": "error", "message": "JSON body is required"}), 400

    customer_id = g.current_profile.id
    try:
        form = checkin.validate_visit_form(data)
        owner_id = owner_from_request(data)
        result = checkin.check_in(customer_id, owner_id, form)
        return jsonify({
            "status": "success",
            "message": f"Visit recorded! You earned {result.points_earned} points.",
            "points_earned": result.points_earned,
            "card_created": result.card_created,
            "visit": result.visit.to_dict(),
            "card": result.card.to_dict(),
        }), 201
    except DecodeError as e:
        current_app.logger.info(f"QR decode failed ({e.reason}) on check-in by {customer_id}")
        return jsonify(e.to_dict()), e.status_code
    except SnipRewardsError as e:
        return jsonify(e.to_dict()), e.status_code
    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Check-in failed for customer {customer_id}: {e}")
        return jsonify({"status": "error", "message": "Failed to record visit", "details": str(e)}), 500
