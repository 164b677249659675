from pydantic import BaseModel
from typing import Dict, List, Optional
from enum import Enum


class LoyaltyTier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"


class CustomerStats(BaseModel):
    customer_id: str
    name: Optional[str] = None
    email: Optional[str] = None
    order_count: int
    total_spent: float
    average_order_value: float
    loyalty_tier: LoyaltyTier


class CustomerBaseSummary(BaseModel):
    total_customers: int
    active_customers: int  # at least one order
    average_spent: float
    new_this_month: int
    tier_counts: Dict[LoyaltyTier, int]


class CustomerInsights(BaseModel):
    summary: CustomerBaseSummary
    customers: List[CustomerStats]
