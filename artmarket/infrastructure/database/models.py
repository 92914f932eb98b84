"""
SQLAlchemy ORM Models.

Maps domain entities to database tables.
"""
from datetime import datetime, timezone
from sqlalchemy import (
    Boolean, CheckConstraint, Column, DateTime, ForeignKey, Index,
    Integer, Numeric, String, Text, text,
)
from sqlalchemy.orm import declarative_base, relationship
import uuid


Base = declarative_base()


def _uuid() -> str:
    return str(uuid.uuid4())


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


# =============================================================================
# LISTING MODEL
# =============================================================================

class ListingModel(Base):
    """
    Artwork listing stock.

    `quantity` is written only by the inventory ledger.
    """

    __tablename__ = "listings"

    id = Column(String(36), primary_key=True, default=_uuid)
    title = Column(String(255), nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    quantity = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    __table_args__ = (
        CheckConstraint("quantity >= 0", name="ck_listings_quantity_non_negative"),
    )

    def __repr__(self):
        return f"<ListingModel(id={self.id}, quantity={self.quantity})>"


# =============================================================================
# ORDER MODEL
# =============================================================================

class OrderModel(Base):
    """
    Order database model.

    A profile has at most one PENDING order, enforced by a partial unique index.
    """

    __tablename__ = "orders"

    id = Column(String(36), primary_key=True, default=_uuid)
    profile_id = Column(String(36), nullable=False, index=True)

    status = Column(String(20), nullable=False, default="PENDING", index=True)

    total_price = Column(Numeric(12, 2), nullable=False, default=0)
    shipping_cost = Column(Numeric(12, 2), nullable=True)

    # Delivery details (set at checkout)
    delivery_address = Column(Text, nullable=True)
    city = Column(String(120), nullable=True)
    zip_code = Column(String(20), nullable=True)
    country = Column(String(120), nullable=True)
    referral_code = Column(String(32), nullable=True)

    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    items = relationship(
        "OrderItemModel",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderItemModel.created_at",
    )
    payments = relationship("PaymentModel", back_populates="order")
    shipment = relationship("ShipmentModel", back_populates="order", uselist=False)

    __table_args__ = (
        CheckConstraint("total_price >= 0", name="ck_orders_total_non_negative"),
        Index(
            "uq_orders_one_pending_per_profile",
            "profile_id",
            unique=True,
            sqlite_where=text("status = 'PENDING'"),
            postgresql_where=text("status = 'PENDING'"),
        ),
        Index("ix_orders_profile_created", "profile_id", "created_at"),
    )

    def __repr__(self):
        return f"<OrderModel(id={self.id}, status={self.status}, total={self.total_price})>"


# =============================================================================
# ORDER ITEM MODEL
# =============================================================================

class OrderItemModel(Base):
    """Order line item; price is snapshotted when the item is added."""

    __tablename__ = "order_items"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(String(36), ForeignKey("orders.id", ondelete="CASCADE"), nullable=False, index=True)
    listing_id = Column(String(36), ForeignKey("listings.id"), nullable=False, index=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    order = relationship("OrderModel", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    def __repr__(self):
        return f"<OrderItemModel(id={self.id}, listing={self.listing_id}, quantity={self.quantity})>"


# =============================================================================
# PAYMENT MODEL
# =============================================================================

class PaymentModel(Base):
    """Gateway payment; transaction_reference is the idempotency key."""

    __tablename__ = "payments"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(String(36), ForeignKey("orders.id"), nullable=False, index=True)
    transaction_reference = Column(String(100), unique=True, nullable=False)
    payee_email = Column(String(255), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    payment_status = Column(String(20), nullable=False, default="INITIATED", index=True)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    order = relationship("OrderModel", back_populates="payments")

    def __repr__(self):
        return f"<PaymentModel(reference={self.transaction_reference}, status={self.payment_status})>"


# =============================================================================
# REFERRAL MODEL
# =============================================================================

class ReferralModel(Base):
    """Referral commission balance."""

    __tablename__ = "referrals"

    id = Column(String(36), primary_key=True, default=_uuid)
    code = Column(String(32), unique=True, nullable=False)
    balance = Column(Numeric(12, 2), nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)

    def __repr__(self):
        return f"<ReferralModel(code={self.code}, balance={self.balance})>"


# =============================================================================
# SHIPMENT MODEL
# =============================================================================

class ShipmentModel(Base):
    """Carrier shipment of an order."""

    __tablename__ = "shipments"

    id = Column(String(36), primary_key=True, default=_uuid)
    order_id = Column(String(36), ForeignKey("orders.id"), unique=True, nullable=False)
    carrier_shipment_id = Column(String(100), nullable=True)
    tracking_id = Column(String(100), nullable=True)
    cost = Column(Numeric(12, 2), nullable=True)
    is_paid = Column(Boolean, default=False, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    order = relationship("OrderModel", back_populates="shipment")

    def __repr__(self):
        return f"<ShipmentModel(order={self.order_id}, tracking={self.tracking_id}, paid={self.is_paid})>"
