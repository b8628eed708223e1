"""Salon profile service - one salon per owner, created or updated in place."""

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from sniprewards.exceptions import NotFound, StoreError, ValidationError
from sniprewards.extensions import db
from sniprewards.models import (
    DEFAULT_LOYALTY_THRESHOLD,
    DEFAULT_REWARD_DESCRIPTION,
    Salon,
)
from sniprewards.services import record_store
from sniprewards.utils import qr_codec

REQUIRED_FIELDS = ("name", "address", "phone")
MAX_LENGTHS = {"name": 120, "address": 255, "phone": 25, "reward_description": 255}


def _clean_text(data: dict, field: str, required: bool):
    value = data.get(field)
    if value is None:
        if required:
            raise ValidationError(f"{field} is required", field=field)
        return None
    if not isinstance(value, str) or (required and not value.strip()):
        raise ValidationError(f"{field} must be a non-empty string", field=field)
    value = value.strip()
    if len(value) > MAX_LENGTHS[field]:
        raise ValidationError(
            f"{field} cannot exceed {MAX_LENGTHS[field]} characters", field=field
        )
    return value


def _clean_threshold(value) -> int:
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise ValidationError(
            "loyalty_threshold must be a positive integer", field="loyalty_threshold"
        )
    return value


def get_salon(owner_id: str) -> Salon | None:
    """Get the owner's salon, or None if they have not registered one."""
    try:
        return record_store.salon_by_owner(owner_id)
    except NotFound:
        return None


def save_salon(owner_id: str, data: dict) -> tuple[Salon, bool]:
    """
    Create or update the owner's salon.

    On creation name, address and phone are required and the QR payload is
    generated from the owner id. Updates only touch the supplied fields and
    never change the owner or the QR payload.

    Returns:
        Tuple of (Salon, created: bool)

    Raises:
        ValidationError: invalid or missing fields
        StoreError: write failed
    """
    data = data or {}
    salon = get_salon(owner_id)
    creating = salon is None

    values = {}
    for field in REQUIRED_FIELDS:
        value = _clean_text(data, field, required=creating or field in data)
        if value is not None:
            values[field] = value

    if "reward_description" in data:
        description = _clean_text(data, "reward_description", required=True)
        values["reward_description"] = description

    if "loyalty_threshold" in data:
        values["loyalty_threshold"] = _clean_threshold(data["loyalty_threshold"])

    try:
        if creating:
            salon = Salon(
                owner_id=owner_id,
                qr_code=qr_codec.encode(owner_id),
                loyalty_threshold=values.pop("loyalty_threshold", DEFAULT_LOYALTY_THRESHOLD),
                reward_description=values.pop(
                    "reward_description", DEFAULT_REWARD_DESCRIPTION
                ),
                **values,
            )
            db.session.add(salon)
        else:
            for field, value in values.items():
                setattr(salon, field, value)
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.error(f"Salon save integrity error for owner {owner_id}: {e}")
        raise StoreError("SALON_CONFLICT", "Salon could not be saved", reason=str(e.orig))
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f"Salon save failed for owner {owner_id}: {e}")
        raise StoreError(reason=str(e))

    return salon, creating
