from sqlmodel import Relationship, SQLModel, Field
import sqlalchemy.dialects.postgresql as pg
from datetime import datetime
from typing import List, Optional
import uuid
from sqlalchemy import Column, String, Numeric
from enum import Enum


"""
___________________________________________________

1.  User Table
___________________________________________________

"""
class User(SQLModel, table = True):
    __tablename__ = 'users'
    uid : uuid.UUID = Field(
        sa_column = Column(
            pg.UUID,
            nullable = False,
            primary_key = True,
            default = uuid.uuid4
        )
    )
    name : str
    email : str = Field(sa_column=Column(String, unique=True, index=True))
    role : str = Field(sa_column=Column(
        pg.VARCHAR, nullable=False, server_default='user'
    ))
    created_at: datetime = Field(sa_column=Column(pg.TIMESTAMP, default=datetime.now))

    orders: List["Order"] = Relationship(back_populates="user", sa_relationship_kwargs={'lazy':'selectin'})

    def __repr__(self):
        return f'<User {self.name}>'


"""
___________________________________________________

2.  Product Table
___________________________________________________

"""
class Product(SQLModel, table=True):
    __tablename__ = "products"

    uid: uuid.UUID = Field(
        sa_column=Column(pg.UUID, nullable=False, primary_key=True, default=uuid.uuid4)
    )
    title: str
    price: float = Field(sa_column=Column(Numeric(10, 2), nullable=False))
    category: str = Field(sa_column=Column(String, nullable=False))
    material: Optional[str] = None
    created_at: datetime = Field(sa_column=Column(pg.TIMESTAMP, default=datetime.now))

    def __repr__(self):
        return f"<Product {self.title}>"


"""
___________________________________________________

3.  Order Tables
___________________________________________________

"""
class OrderStatus(str, Enum):
    pending = "Pending"
    processing = "Processing"
    shipped = "Shipped"
    delivered = "Delivered"
    cancelled = "Cancelled"


class Order(SQLModel, table=True):
    __tablename__ = "orders"

    uid: uuid.UUID = Field(
        sa_column=Column(pg.UUID, nullable=False, primary_key=True, default=uuid.uuid4)
    )
    user_uid: Optional[uuid.UUID] = Field(default=None, foreign_key="users.uid")
    status: Optional[str] = Field(default=OrderStatus.pending.value)
    payment_status: Optional[str] = None
    total_amount: Optional[float] = Field(sa_column=Column(Numeric(10, 2), nullable=True))
    contact_number: Optional[str] = None
    guest_name: Optional[str] = None
    guest_email: Optional[str] = None
    created_at: Optional[datetime] = Field(sa_column=Column(pg.TIMESTAMP, default=datetime.now))

    user: Optional[User] = Relationship(back_populates="orders", sa_relationship_kwargs={'lazy': 'selectin'})
    items: List["OrderItem"] = Relationship(back_populates="order", sa_relationship_kwargs={'lazy': 'selectin', 'cascade': 'all, delete-orphan'})


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"

    uid: uuid.UUID = Field(
        sa_column=Column(pg.UUID, nullable=False, primary_key=True, default=uuid.uuid4)
    )
    order_uid: uuid.UUID = Field(default=None, foreign_key="orders.uid")
    # No foreign key: items outlive deleted catalog products
    product_uid: Optional[uuid.UUID] = Field(default=None)
    name: Optional[str] = None
    quantity: int = Field(default=1)
    price: Optional[float] = Field(sa_column=Column(Numeric(10, 2), nullable=True))

    order: Order = Relationship(back_populates="items")
