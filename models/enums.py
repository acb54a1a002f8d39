"""
Centralized Enum definitions for the project.
"""

from enum import Enum


class PricingRuleType(str, Enum):
    """Kinds of catalog price adjustment rules"""

    INVENTORY_BASED = "inventory_based"
    DEMAND_BASED = "demand_based"
    COMPETITOR_BASED = "competitor_based"
    TIME_BASED = "time_based"
    CUSTOMER_SEGMENT_BASED = "customer_segment_based"
    SEASONAL_BASED = "seasonal_based"


class CustomerSegment(str, Enum):
    """Customer segments used by value-based and checkout pricing"""

    NEW = "new"
    REGULAR = "regular"
    VIP = "vip"
    PREMIUM = "premium"
    CHURNED = "churned"
    AT_RISK = "at_risk"  # Older catalogs label churn risk this way


class OrderStatus(str, Enum):
    """Possible states of a retail order"""

    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
