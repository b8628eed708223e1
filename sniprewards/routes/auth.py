from flask import Blueprint, request, jsonify, current_app, g
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from ..extensions import db
from ..models import AuthUser, Profile, ROLES
from ..utils.auth import check_password, hash_password, issue_token, require_auth

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")


@auth_bp.route("/signup", methods=["POST"])
def signup_user():
    """
    Register a new account
    ---
    tags:
      - Authentication
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          required: [email, password, role]
          properties:
            email:
              type: string
            password:
              type: string
            full_name:
              type: string
            phone:
              type: string
            role:
              type: string
              enum: [salon_owner, barber, customer]
    responses:
      201:
        description: Account created
        schema:
          type: object
          properties:
            status:
              type: string
            user:
              $ref: '#/definitions/Profile'
      400:
        description: Missing fields, unsupported role or duplicate email
        schema:
          $ref: '#/definitions/Error'
    """
    try:
        data = request.get_json(force=True, silent=True) or {}
        email = (data.get("email") or "").strip().lower()
        password = data.get("password")
        full_name = data.get("full_name")
        phone = data.get("phone")
        role = (data.get("role") or "customer").strip().lower()

        if not email or not isinstance(password, str) or not password:
            return jsonify({
                "status": "error",
                "message": "Missing required fields (email, password)"
            }), 400

        if role not in ROLES:
            return jsonify({
                "status": "error",
                "message": f"Role '{role}' is not a valid or supported role for this signup."
            }), 400

        existing = db.session.scalar(select(AuthUser).where(AuthUser.email == email))
        if existing:
            return jsonify({
                "status": "error",
                "message": "Email already exists"
            }), 400

        auth_user = AuthUser(email=email, password_hash=hash_password(password))
        db.session.add(auth_user)
        db.session.flush()

        profile = Profile(
            id=auth_user.id,
            email=email,
            full_name=full_name,
            phone=phone,
            role=role,
        )
        db.session.add(profile)
        db.session.commit()

        return jsonify({
            "status": "success",
            "message": "User registered successfully",
            "user": profile.to_dict()
        }), 201

    except IntegrityError as e:
        db.session.rollback()
        return jsonify({
            "status": "error",
            "message": "Database integrity error",
            "details": str(e.orig)
        }), 400

    except Exception as e:
        db.session.rollback()
        current_app.logger.error(f"Signup failed: {e}")
        return jsonify({
            "status": "error",
            "message": "Internal server error",
            "details": str(e)
        }), 500


@auth_bp.route("/login", methods=["POST"])
def login_user():
    """
    Exchange credentials for an access token
    ---
    tags:
      - Authentication
    parameters:
      - in: body
        name: body
        required: true
        schema:
          type: object
          properties:
            email:
              type: string
            password:
              type: string
    responses:
      200:
        description: Login successful
      401:
        description: Invalid credentials
    """
    try:
        data = request.get_json(force=True, silent=True) or {}
        email = (data.get("email") or "").strip().lower()
        password = data.get("password")

        if not email or not isinstance(password, str) or not password:
            return jsonify({
                "status": "error",
                "message": "Email and password required"
            }), 400

        user = db.session.scalar(select(AuthUser).where(AuthUser.email == email))
        if not user or not user.profile or not check_password(password, user.password_hash):
            current_app.logger.warning(f"Rejected login for {email}")
            return jsonify({
                "status": "error",
                "message": "Invalid credentials"
            }), 401

        return jsonify({
            "status": "success",
            "message": "Login successful",
            "token": issue_token(user.profile),
            "user": user.profile.to_dict()
        }), 200

    except Exception as e:
        current_app.logger.error(f"Login failed: {e}")
        return jsonify({
            "status": "error",
            "message": "Internal server error",
            "details": str(e)
        }), 500


@auth_bp.route("/me", methods=["GET"])
@require_auth()
def get_current_user():
    """
    Current user's profile
    ---
    tags:
      - Authentication
    responses:
      200:
        description: Profile of the token holder
        schema:
          $ref: '#/definitions/Profile'
      401:
        description: Missing or invalid token
    """
    return jsonify(g.current_profile.to_dict()), 200
