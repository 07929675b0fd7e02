from models import City, Customer, EvaluationStrategy, Order, Product, Shop
from pipeline import Pipeline
from utils import compare_strategies, setup_logging
import shop_queries

setup_logging()

canberra, vancouver, budapest = City(name="Canberra"), City(name="Vancouver"), City(name="Budapest")
idea = Product(name="IntelliJ IDEA Ultimate", price=199.0)
rider = Product(name="Rider", price=149.0)
dotmemory = Product(name="dotMemory", price=129.0)

shop = Shop(name="jb test shop", customers=[
    Customer(name="Lucas", city=canberra, orders=[
        Order(products=[rider], is_delivered=False),
    ]),
    Customer(name="Cooper", city=vancouver, orders=[
        Order(products=[idea, idea], is_delivered=True),
        Order(products=[dotmemory], is_delivered=False),
        Order(products=[rider], is_delivered=False),
    ]),
    Customer(name="Nathan", city=budapest, orders=[
        Order(products=[rider, idea], is_delivered=True),
    ]),
])

print("\n--- Demo: the same queries through both strategies ---")
for strategy in EvaluationStrategy:
    print(f"[{strategy.value}]")
    print("  grouped by city:", {city.name: [c.name for c in customers]
                                 for city, customers in shop_queries.group_customers_by_city(shop, strategy).items()})
    cooper = shop.customers[1]
    print("  Cooper spent:", shop_queries.money_spent(cooper, strategy))
    print("  Cooper's most expensive delivered product:",
          shop_queries.get_most_expensive_delivered_product(cooper, strategy))
    print("  ordered by everyone:", shop_queries.get_products_ordered_by_all_customers(shop, strategy))

print("\n--- Demo: short-circuiting (lazy reads fewer source elements) ---")
numbers = range(1, 10_000)
pipeline = Pipeline().map(lambda x: x * x).filter(lambda v: v % 7 == 0).find(lambda v: v > 100)
comparison = compare_strategies(pipeline, numbers)
print(f"Result: {comparison.lazy_result}")
print(f"Eager read {comparison.eager_pulls} elements, lazy read {comparison.lazy_pulls}")
