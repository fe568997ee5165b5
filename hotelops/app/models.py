"""Database models for hotels, service requests, orders and rewards.

These models describe the relational schema used by the application. They are
kept isolated from any application wiring so that they can be used in tests or
migrations independently."""

from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    Numeric,
    String,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import declarative_base

from .domain import OrderStatus, TicketStatus, VoucherStatus

Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


class Hotel(Base):
    """A property; every other record is scoped to one."""

    __tablename__ = "hotels"

    id = Column(String(36), primary_key=True, default=_uuid)
    slug = Column(String, unique=True, nullable=False)
    name = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())


class Service(Base):
    """Requestable service with its SLA target in minutes."""

    __tablename__ = "services"
    __table_args__ = (
        UniqueConstraint("hotel_id", "key", name="uq_services_hotel_key"),
        CheckConstraint("sla_minutes >= 0", name="ck_services_sla_nonneg"),
    )

    id = Column(Integer, primary_key=True)
    hotel_id = Column(String(36), ForeignKey("hotels.id"), nullable=False, index=True)
    key = Column(String, nullable=False)
    label = Column(String, nullable=False)
    sla_minutes = Column(Integer, nullable=False, default=30)
    active = Column(Boolean, nullable=False, default=True)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class Ticket(Base):
    """Guest service request, closed exactly once."""

    __tablename__ = "tickets"

    id = Column(String(36), primary_key=True, default=_uuid)
    hotel_id = Column(String(36), ForeignKey("hotels.id"), nullable=False, index=True)
    service_key = Column(String, nullable=False)
    room = Column(String, nullable=True)
    booking_code = Column(String, nullable=True)
    status = Column(String, nullable=False, default=TicketStatus.OPEN.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    closed_at = Column(DateTime(timezone=True), nullable=True, index=True)
    minutes_to_close = Column(Integer, nullable=True)
    on_time = Column(Boolean, nullable=True)


class MenuItem(Base):
    """Orderable F&B item."""

    __tablename__ = "menu_items"
    __table_args__ = (
        UniqueConstraint("hotel_id", "item_key", name="uq_menu_items_hotel_key"),
    )

    id = Column(Integer, primary_key=True)
    hotel_id = Column(String(36), ForeignKey("hotels.id"), nullable=False, index=True)
    item_key = Column(String, nullable=False)
    name = Column(String, nullable=False)
    price = Column(Numeric(10, 2), nullable=True)
    active = Column(Boolean, nullable=False, default=True)


class Order(Base):
    """F&B order; ``closed_at`` is stamped on terminal transitions."""

    __tablename__ = "orders"
    __table_args__ = (CheckConstraint("qty >= 1", name="ck_orders_qty_positive"),)

    id = Column(String(36), primary_key=True, default=_uuid)
    hotel_id = Column(String(36), ForeignKey("hotels.id"), nullable=False, index=True)
    room = Column(String, nullable=True)
    booking_code = Column(String, nullable=True)
    item_key = Column(String, nullable=False)
    qty = Column(Integer, nullable=False, default=1)
    price = Column(Numeric(10, 2), nullable=False)
    status = Column(String, nullable=False, default=OrderStatus.PREPARING.value)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    closed_at = Column(DateTime(timezone=True), nullable=True)


class AiUsage(Base):
    """Monthly AI token counter per hotel."""

    __tablename__ = "ai_usage"

    hotel_id = Column(String(36), ForeignKey("hotels.id"), primary_key=True)
    month_utc = Column(String(7), primary_key=True)
    used_tokens = Column(Integer, nullable=False, default=0)
    budget_tokens = Column(Integer, nullable=False, default=0)


class RewardBalance(Base):
    """Credit a user holds at a hotel, in paise."""

    __tablename__ = "reward_balances"
    __table_args__ = (
        CheckConstraint("available_paise >= 0", name="ck_reward_balances_nonneg"),
    )

    user_id = Column(String, primary_key=True)
    hotel_id = Column(String(36), ForeignKey("hotels.id"), primary_key=True)
    available_paise = Column(Integer, nullable=False, default=0)
    pending_paise = Column(Integer, nullable=False, default=0)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )


class RewardVoucher(Base):
    """Fixed-amount voucher issued from a reward balance."""

    __tablename__ = "reward_vouchers"

    id = Column(String(36), primary_key=True, default=_uuid)
    code = Column(String, unique=True, nullable=False)
    user_id = Column(String, nullable=False, index=True)
    hotel_id = Column(String(36), ForeignKey("hotels.id"), nullable=False)
    amount_paise = Column(Integer, nullable=False)
    status = Column(String, nullable=False, default=VoucherStatus.ACTIVE.value)
    expires_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())


__all__ = [
    "Base",
    "Hotel",
    "Service",
    "Ticket",
    "MenuItem",
    "Order",
    "AiUsage",
    "RewardBalance",
    "RewardVoucher",
]
