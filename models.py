"""
Shop Collections - Pydantic Models

Immutable domain entities (City, Product, Order, Customer, Shop) plus the
settings and result models used by the evaluation engine.
"""

import logging
from typing import Any, Dict, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator
from enum import Enum


class City(BaseModel):
    """A city, identified by its name"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="City name")

    def __eq__(self, other):
        if not isinstance(other, City):
            return NotImplemented
        return self.name == other.name

    def __hash__(self):
        return hash((City, self.name))

    def __repr__(self):
        return f"City({self.name!r})"


class Product(BaseModel):
    """A product with a non-negative price"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Product name")
    price: float = Field(..., description="Unit price", ge=0)

    def __eq__(self, other):
        if not isinstance(other, Product):
            return NotImplemented
        return (self.name, self.price) == (other.name, other.price)

    def __hash__(self):
        return hash((Product, self.name, self.price))

    def __repr__(self):
        return f"Product({self.name!r}, {self.price!r})"


class Order(BaseModel):
    """An ordered sequence of products; the same product may appear twice"""
    model_config = ConfigDict(frozen=True)

    products: Tuple[Product, ...] = Field(
        default_factory=tuple,
        description="Products in the order, in order of entry"
    )
    is_delivered: bool = Field(False, description="Whether the order was delivered")

    def __eq__(self, other):
        if not isinstance(other, Order):
            return NotImplemented
        return (self.products, self.is_delivered) == (other.products, other.is_delivered)

    def __hash__(self):
        return hash((Order, self.products, self.is_delivered))


class Customer(BaseModel):
    """
    A customer living in a city with a history of orders.

    Two customers with the same name, city and orders are equal and
    interchangeable as dict or set keys.
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Customer name")
    city: City = Field(..., description="City the customer is from")
    orders: Tuple[Order, ...] = Field(
        default_factory=tuple,
        description="Orders placed by the customer, oldest first"
    )

    def __eq__(self, other):
        if not isinstance(other, Customer):
            return NotImplemented
        return (self.name, self.city, self.orders) == (other.name, other.city, other.orders)

    def __hash__(self):
        return hash((Customer, self.name, self.city, self.orders))

    def __repr__(self):
        return f"Customer({self.name!r}, {self.city!r})"


class Shop(BaseModel):
    """A named shop and its customers"""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Shop name")
    customers: Tuple[Customer, ...] = Field(
        default_factory=tuple,
        description="Customers of the shop"
    )

    def __eq__(self, other):
        if not isinstance(other, Shop):
            return NotImplemented
        return (self.name, self.customers) == (other.name, other.customers)

    def __hash__(self):
        return hash((Shop, self.name, self.customers))


class EvaluationStrategy(str, Enum):
    """How a pipeline is executed"""
    EAGER = "eager"
    LAZY = "lazy"


class QuerySettings(BaseModel):
    """Process-wide evaluation settings"""
    model_config = ConfigDict(frozen=True)

    default_strategy: EvaluationStrategy = Field(
        EvaluationStrategy.EAGER,
        description="Strategy used when a caller does not pick one"
    )
    log_level: str = Field(
        "INFO",
        description="Log level applied by setup_logging()",
        examples=["DEBUG", "INFO"]
    )
    trace_pulls: bool = Field(
        False,
        description="Log every element pulled from a lazy source at DEBUG level"
    )

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Validate the log level is one logging understands"""
        level = str(v).strip().upper()
        if not isinstance(logging.getLevelName(level), int):
            raise ValueError(f"Unknown log level: {v}")
        return level


_settings = QuerySettings()


def get_settings() -> QuerySettings:
    """Return the current process-wide settings"""
    return _settings


def configure(**overrides: Any) -> QuerySettings:
    """Replace the process-wide settings, keeping fields that are not overridden"""
    global _settings
    _settings = QuerySettings(**{**_settings.model_dump(), **overrides})
    return _settings


class StrategyComparison(BaseModel):
    """Outcome of running the same pipeline through both strategies"""
    eager_result: Any = Field(..., description="Result of the eager strategy")
    lazy_result: Any = Field(..., description="Result of the lazy strategy")
    eager_pulls: int = Field(..., description="Source elements read by the eager strategy", ge=0)
    lazy_pulls: int = Field(..., description="Source elements read by the lazy strategy", ge=0)
    equivalent: bool = Field(..., description="Whether both results are equal")
    stage_count: int = Field(..., description="Number of intermediate stages", ge=0)
    terminal: Optional[str] = Field(None, description="Terminal operation name")
    timings_ms: Dict[str, float] = Field(
        default_factory=dict,
        description="Wall time per strategy in milliseconds"
    )
