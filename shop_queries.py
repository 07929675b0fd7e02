"""
Business queries over a Shop.

Every query is a chain of pipeline operators and takes an optional
`strategy`; the eager and lazy strategies return the same answer.
"""

import logging
from typing import Dict, List, Optional, Set

from collection import collection_for
from models import City, Customer, EvaluationStrategy, Product, Shop
from operators import intersect

logger = logging.getLogger(__name__)


# --------- customers and cities ----------

def get_set_of_customers(shop: Shop, strategy: Optional[EvaluationStrategy] = None) -> Set[Customer]:
    return collection_for(shop.customers, strategy).to_set()


def get_cities_customers_are_from(shop: Shop, strategy: Optional[EvaluationStrategy] = None) -> Set[City]:
    return collection_for(shop.customers, strategy).map(lambda c: c.city).to_set()


def get_customers_from(shop: Shop, city: City, strategy: Optional[EvaluationStrategy] = None) -> List[Customer]:
    return collection_for(shop.customers, strategy).filter(lambda c: c.city == city).to_list()


def check_all_customers_are_from(shop: Shop, city: City, strategy: Optional[EvaluationStrategy] = None) -> bool:
    return collection_for(shop.customers, strategy).all(lambda c: c.city == city)


def has_customer_from(shop: Shop, city: City, strategy: Optional[EvaluationStrategy] = None) -> bool:
    return collection_for(shop.customers, strategy).any(lambda c: c.city == city)


def count_customers_from(shop: Shop, city: City, strategy: Optional[EvaluationStrategy] = None) -> int:
    return collection_for(shop.customers, strategy).count(lambda c: c.city == city)


def find_customer_from(shop: Shop, city: City, strategy: Optional[EvaluationStrategy] = None) -> Optional[Customer]:
    return collection_for(shop.customers, strategy).find(lambda c: c.city == city)


def group_customers_by_city(shop: Shop, strategy: Optional[EvaluationStrategy] = None) -> Dict[City, List[Customer]]:
    """Cities appear in the order their first customer appears"""
    return collection_for(shop.customers, strategy).group_by(lambda c: c.city)


def get_customers_sorted_by_number_of_orders(shop: Shop,
                                             strategy: Optional[EvaluationStrategy] = None) -> List[Customer]:
    return collection_for(shop.customers, strategy).sorted_by(lambda c: len(c.orders)).to_list()


def get_customer_with_max_orders(shop: Shop, strategy: Optional[EvaluationStrategy] = None) -> Optional[Customer]:
    return collection_for(shop.customers, strategy).max_by(lambda c: len(c.orders))


def get_customers_with_more_undelivered_orders(shop: Shop,
                                               strategy: Optional[EvaluationStrategy] = None) -> Set[Customer]:
    def more_undelivered(customer):
        delivered, undelivered = collection_for(customer.orders, strategy).partition(lambda o: o.is_delivered)
        return len(undelivered) > len(delivered)

    return collection_for(shop.customers, strategy).filter(more_undelivered).to_set()


# --------- products ----------

def get_ordered_products(customer: Customer, strategy: Optional[EvaluationStrategy] = None) -> List[Product]:
    """All products the customer ordered, in order, duplicates included"""
    return collection_for(customer.orders, strategy).flat_map(lambda o: o.products).to_list()


def get_ordered_products_set(customer: Customer, strategy: Optional[EvaluationStrategy] = None) -> Set[Product]:
    return collection_for(customer.orders, strategy).flat_map(lambda o: o.products).to_set()


def get_all_ordered_products(shop: Shop, strategy: Optional[EvaluationStrategy] = None) -> Set[Product]:
    return (
        collection_for(shop.customers, strategy)
        .flat_map(lambda c: c.orders)
        .flat_map(lambda o: o.products)
        .to_set()
    )


def get_most_expensive_ordered_product(customer: Customer,
                                       strategy: Optional[EvaluationStrategy] = None) -> Optional[Product]:
    return (
        collection_for(customer.orders, strategy)
        .flat_map(lambda o: o.products)
        .max_by(lambda p: p.price)
    )


def get_most_expensive_delivered_product(customer: Customer,
                                         strategy: Optional[EvaluationStrategy] = None) -> Optional[Product]:
    return (
        collection_for(customer.orders, strategy)
        .filter(lambda o: o.is_delivered)
        .flat_map(lambda o: o.products)
        .max_by(lambda p: p.price)
    )


def get_number_of_times_product_was_ordered(shop: Shop, product: Product,
                                            strategy: Optional[EvaluationStrategy] = None) -> int:
    return (
        collection_for(shop.customers, strategy)
        .flat_map(lambda c: c.orders)
        .flat_map(lambda o: o.products)
        .count(lambda p: p == product)
    )


def money_spent(customer: Customer, strategy: Optional[EvaluationStrategy] = None) -> float:
    """Total price of everything the customer ordered, delivered or not"""
    return (
        collection_for(customer.orders, strategy)
        .flat_map(lambda o: o.products)
        .sum_of(lambda p: p.price)
    )


def get_products_ordered_by_all_customers(shop: Shop,
                                          strategy: Optional[EvaluationStrategy] = None) -> Set[Product]:
    all_products = get_all_ordered_products(shop, strategy)
    return collection_for(shop.customers, strategy).fold(
        all_products,
        lambda ordered_by_all, customer: intersect(ordered_by_all, get_ordered_products(customer, strategy)),
    )


# --------- indexes ----------

def index_customers_by_name(shop: Shop, strategy: Optional[EvaluationStrategy] = None) -> Dict[str, Customer]:
    """Customers by name. Namesakes collide and the last one listed is kept."""
    index = collection_for(shop.customers, strategy).associate_by(lambda c: c.name)
    if len(index) < len(shop.customers):
        logger.info(f"{len(shop.customers) - len(index)} customer(s) shadowed by a namesake in {shop.name!r}")
    return index


def customer_to_city(shop: Shop, strategy: Optional[EvaluationStrategy] = None) -> Dict[Customer, City]:
    return collection_for(shop.customers, strategy).associate_with(lambda c: c.city)


def name_to_city(shop: Shop, strategy: Optional[EvaluationStrategy] = None) -> Dict[str, City]:
    return collection_for(shop.customers, strategy).associate(lambda c: (c.name, c.city))
