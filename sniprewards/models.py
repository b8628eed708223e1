import uuid
from typing import List, Optional

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Enum,
    ForeignKeyConstraint,
    Index,
    Integer,
    LargeBinary,
    Numeric,
    String,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, declarative_base, mapped_column, relationship

Base = declarative_base()
metadata = Base.metadata

ROLES = ("salon_owner", "barber", "customer")
DEFAULT_LOYALTY_THRESHOLD = 10
DEFAULT_REWARD_DESCRIPTION = "Free haircut after 10 visits"


def new_id() -> str:
    return str(uuid.uuid4())


def _iso(value) -> Optional[str]:
    return value.isoformat() if value else None


class AuthUser(Base):
    __tablename__ = "auth_user"
    __table_args__ = (Index("uq_auth_user_email", "email", unique=True),)

    id = mapped_column(String(36), primary_key=True, default=new_id)
    email = mapped_column(String(255), nullable=False)
    password_hash = mapped_column(LargeBinary(72), nullable=False)
    created_at = mapped_column(
        DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    profile: Mapped[Optional["Profile"]] = relationship(
        "Profile", uselist=False, back_populates="user"
    )


class Profile(Base):
    __tablename__ = "profiles"
    __table_args__ = (
        ForeignKeyConstraint(
            ["id"], ["auth_user.id"], ondelete="CASCADE", name="fk_profile_auth_user"
        ),
        Index("idx_profiles_role", "role"),
    )

    id = mapped_column(String(36), primary_key=True)
    email = mapped_column(String(255), nullable=False)
    full_name = mapped_column(String(200))
    phone = mapped_column(String(25))
    role = mapped_column(Enum(*ROLES, name="profile_role"), nullable=False)
    created_at = mapped_column(
        DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=func.now(),
    )

    user: Mapped["AuthUser"] = relationship("AuthUser", back_populates="profile")
    salon: Mapped[Optional["Salon"]] = relationship(
        "Salon", uselist=False, back_populates="owner"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "email": self.email,
            "full_name": self.full_name,
            "phone": self.phone,
            "role": self.role,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Salon(Base):
    __tablename__ = "salons"
    __table_args__ = (
        ForeignKeyConstraint(
            ["owner_id"], ["profiles.id"], ondelete="RESTRICT", name="fk_salon_owner"
        ),
        Index("uq_salons_owner_id", "owner_id", unique=True),
        CheckConstraint("loyalty_threshold > 0", name="ck_salons_loyalty_threshold"),
    )

    id = mapped_column(String(36), primary_key=True, default=new_id)
    name = mapped_column(String(120), nullable=False)
    address = mapped_column(String(255), nullable=False)
    phone = mapped_column(String(25), nullable=False)
    owner_id = mapped_column(String(36), nullable=False)
    qr_code = mapped_column(String(512), nullable=False)
    loyalty_threshold = mapped_column(
        Integer, nullable=False, default=DEFAULT_LOYALTY_THRESHOLD
    )
    reward_description = mapped_column(
        String(255), nullable=False, default=DEFAULT_REWARD_DESCRIPTION
    )
    created_at = mapped_column(
        DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=func.now(),
    )

    owner: Mapped["Profile"] = relationship("Profile", back_populates="salon")
    visits: Mapped[List["Visit"]] = relationship(
        "Visit", uselist=True, back_populates="salon"
    )
    loyalty_cards: Mapped[List["LoyaltyCard"]] = relationship(
        "LoyaltyCard", uselist=True, back_populates="salon"
    )

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "address": self.address,
            "phone": self.phone,
            "owner_id": self.owner_id,
            "qr_code": self.qr_code,
            "loyalty_threshold": self.loyalty_threshold,
            "reward_description": self.reward_description,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Visit(Base):
    """Append-only log of check-ins. Rows are never updated."""

    __tablename__ = "visits"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"], ["profiles.id"], ondelete="CASCADE", name="fk_visit_customer"
        ),
        ForeignKeyConstraint(
            ["salon_id"], ["salons.id"], ondelete="CASCADE", name="fk_visit_salon"
        ),
        ForeignKeyConstraint(
            ["barber_id"], ["profiles.id"], ondelete="SET NULL", name="fk_visit_barber"
        ),
        Index("idx_visits_customer_date", "customer_id", "visit_date"),
        Index("idx_visits_salon", "salon_id"),
        CheckConstraint("amount >= 0", name="ck_visits_amount"),
        CheckConstraint("points_earned >= 0", name="ck_visits_points"),
    )

    id = mapped_column(String(36), primary_key=True, default=new_id)
    customer_id = mapped_column(String(36), nullable=False)
    salon_id = mapped_column(String(36), nullable=False)
    barber_id = mapped_column(String(36))
    service_type = mapped_column(Text, nullable=False)
    amount = mapped_column(Numeric(10, 2), nullable=False)
    points_earned = mapped_column(Integer, nullable=False)
    visit_date = mapped_column(DateTime, nullable=False)
    created_at = mapped_column(
        DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )

    salon: Mapped["Salon"] = relationship("Salon", back_populates="visits")
    customer: Mapped["Profile"] = relationship("Profile", foreign_keys=[customer_id])
    barber: Mapped[Optional["Profile"]] = relationship(
        "Profile", foreign_keys=[barber_id]
    )

    def to_dict(self):
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "salon_id": self.salon_id,
            "barber_id": self.barber_id,
            "service_type": self.service_type,
            "amount": str(self.amount) if self.amount is not None else None,
            "points_earned": self.points_earned,
            "visit_date": _iso(self.visit_date),
            "created_at": _iso(self.created_at),
        }


class LoyaltyCard(Base):
    __tablename__ = "loyalty_cards"
    __table_args__ = (
        ForeignKeyConstraint(
            ["customer_id"], ["profiles.id"], ondelete="CASCADE", name="fk_card_customer"
        ),
        ForeignKeyConstraint(
            ["salon_id"], ["salons.id"], ondelete="CASCADE", name="fk_card_salon"
        ),
        Index("uq_loyalty_cards_customer_salon", "customer_id", "salon_id", unique=True),
        Index("idx_loyalty_cards_salon", "salon_id"),
        CheckConstraint("total_visits >= 0", name="ck_cards_total_visits"),
        CheckConstraint("total_points >= 0", name="ck_cards_total_points"),
        CheckConstraint("rewards_redeemed >= 0", name="ck_cards_rewards_redeemed"),
    )

    id = mapped_column(String(36), primary_key=True, default=new_id)
    customer_id = mapped_column(String(36), nullable=False)
    salon_id = mapped_column(String(36), nullable=False)
    total_visits = mapped_column(Integer, nullable=False, default=0)
    total_points = mapped_column(Integer, nullable=False, default=0)
    rewards_redeemed = mapped_column(Integer, nullable=False, default=0)
    created_at = mapped_column(
        DateTime, nullable=False, server_default=text("CURRENT_TIMESTAMP")
    )
    updated_at = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
        onupdate=func.now(),
    )

    salon: Mapped["Salon"] = relationship("Salon", back_populates="loyalty_cards")
    customer: Mapped["Profile"] = relationship("Profile")

    def to_dict(self):
        return {
            "id": self.id,
            "customer_id": self.customer_id,
            "salon_id": self.salon_id,
            "total_visits": self.total_visits,
            "total_points": self.total_points,
            "rewards_redeemed": self.rewards_redeemed,
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
