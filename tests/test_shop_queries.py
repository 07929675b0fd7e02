import logging

from models import City, Customer, Product, Shop
import shop_queries


class TestEndToEnd:
    """Alice (X) and Bob (Y) through both strategies"""

    def test_money_spent_by_alice(self, small_shop, strategy):
        alice = small_shop.customers[0]
        spent = shop_queries.money_spent(alice, strategy)
        assert spent == 15.0, f"Alice should have spent 15.0, got {spent}"

    def test_group_by_city_keeps_key_order(self, small_shop, strategy):
        alice, bob = small_shop.customers
        groups = shop_queries.group_customers_by_city(small_shop, strategy)
        assert groups == {City(name="X"): [alice], City(name="Y"): [bob]}, f"Unexpected groups: {groups}"
        assert [city.name for city in groups] == ["X", "Y"], "Cities should follow first occurrence"

    def test_most_expensive_delivered_product(self, small_shop, strategy):
        alice, bob = small_shop.customers
        product = shop_queries.get_most_expensive_delivered_product(alice, strategy)
        assert product == Product(name="P2", price=10.0), f"Expected P2, got {product}"
        assert shop_queries.get_most_expensive_delivered_product(bob, strategy) is None, \
            "Bob has no delivered orders"


class TestCustomerQueries:
    """Queries over customers and cities"""

    def test_set_of_customers(self, test_shop, strategy):
        customers = shop_queries.get_set_of_customers(test_shop, strategy)
        assert customers == set(test_shop.customers)

    def test_cities(self, test_shop, cities, strategy):
        result = shop_queries.get_cities_customers_are_from(test_shop, strategy)
        assert result == {cities["canberra"], cities["vancouver"], cities["budapest"]}, f"Unexpected: {result}"

    def test_customers_from(self, test_shop, cities, strategy):
        result = shop_queries.get_customers_from(test_shop, cities["canberra"], strategy)
        assert [c.name for c in result] == ["Lucas", "Asuka"], f"Unexpected: {result}"

    def test_city_predicates(self, test_shop, cities, strategy):
        assert shop_queries.check_all_customers_are_from(test_shop, cities["canberra"], strategy) is False
        assert shop_queries.has_customer_from(test_shop, cities["budapest"], strategy) is True
        assert shop_queries.has_customer_from(test_shop, cities["tokyo"], strategy) is False
        assert shop_queries.count_customers_from(test_shop, cities["canberra"], strategy) == 2
        assert shop_queries.find_customer_from(test_shop, cities["canberra"], strategy).name == "Lucas"
        assert shop_queries.find_customer_from(test_shop, cities["tokyo"], strategy) is None

    def test_all_customers_from_in_single_city_shop(self, cities, strategy):
        only = Customer(name="Solo", city=cities["tokyo"])
        shop = Shop(name="tiny", customers=[only])
        assert shop_queries.check_all_customers_are_from(shop, cities["tokyo"], strategy) is True
        assert shop_queries.check_all_customers_are_from(Shop(name="empty"), cities["tokyo"], strategy) is True

    def test_group_by_city(self, test_shop, strategy):
        groups = shop_queries.group_customers_by_city(test_shop, strategy)
        summary = [(city.name, [c.name for c in customers]) for city, customers in groups.items()]
        expected = [("Canberra", ["Lucas", "Asuka"]), ("Vancouver", ["Cooper"]), ("Budapest", ["Nathan"])]
        assert summary == expected, f"Expected {expected}, got {summary}"

    def test_sorted_by_number_of_orders_is_stable(self, test_shop, strategy):
        result = shop_queries.get_customers_sorted_by_number_of_orders(test_shop, strategy)
        assert [c.name for c in result] == ["Lucas", "Asuka", "Nathan", "Cooper"], f"Unexpected: {result}"

    def test_customer_with_max_orders(self, test_shop, strategy):
        assert shop_queries.get_customer_with_max_orders(test_shop, strategy).name == "Cooper"
        assert shop_queries.get_customer_with_max_orders(Shop(name="empty"), strategy) is None

    def test_more_undelivered_than_delivered(self, test_shop, strategy):
        result = shop_queries.get_customers_with_more_undelivered_orders(test_shop, strategy)
        assert {c.name for c in result} == {"Lucas", "Cooper"}, f"Unexpected: {result}"


class TestProductQueries:
    """Queries flattening orders into products"""

    def test_ordered_products_keep_duplicates(self, test_shop, products, strategy):
        cooper = test_shop.customers[1]
        result = shop_queries.get_ordered_products(cooper, strategy)
        expected = [products["idea"], products["idea"], products["dotmemory"], products["rider"], products["webstorm"]]
        assert result == expected, f"Expected {expected}, got {result}"
        assert shop_queries.get_ordered_products_set(cooper, strategy) == set(expected)

    def test_all_ordered_products(self, test_shop, products, strategy):
        assert shop_queries.get_all_ordered_products(test_shop, strategy) == set(products.values())

    def test_most_expensive_products(self, test_shop, products, strategy):
        lucas, cooper = test_shop.customers[0], test_shop.customers[1]
        assert shop_queries.get_most_expensive_ordered_product(cooper, strategy) == products["idea"]
        assert shop_queries.get_most_expensive_delivered_product(cooper, strategy) == products["idea"]
        assert shop_queries.get_most_expensive_delivered_product(lucas, strategy) is None

    def test_number_of_times_ordered(self, test_shop, products, strategy):
        assert shop_queries.get_number_of_times_product_was_ordered(test_shop, products["idea"], strategy) == 5
        assert shop_queries.get_number_of_times_product_was_ordered(test_shop, products["rider"], strategy) == 4
        missing = Product(name="AppCode", price=99.0)
        assert shop_queries.get_number_of_times_product_was_ordered(test_shop, missing, strategy) == 0

    def test_money_spent(self, test_shop, strategy):
        cooper = test_shop.customers[1]
        spent = shop_queries.money_spent(cooper, strategy)
        assert spent == 745.0, f"Expected 745.0, got {spent}"

    def test_products_ordered_by_all_customers(self, test_shop, products, strategy):
        result = shop_queries.get_products_ordered_by_all_customers(test_shop, strategy)
        assert result == {products["idea"], products["rider"]}, f"Unexpected: {result}"
        assert shop_queries.get_products_ordered_by_all_customers(Shop(name="empty"), strategy) == set()


class TestIndexes:
    """associate_by / associate_with / associate over customers"""

    def test_index_by_name(self, test_shop, strategy):
        index = shop_queries.index_customers_by_name(test_shop, strategy)
        assert list(index) == ["Lucas", "Cooper", "Nathan", "Asuka"]
        assert index["Nathan"] is test_shop.customers[2]

    def test_namesakes_collide_and_last_wins(self, cities, strategy, caplog):
        first = Customer(name="Alice", city=cities["canberra"])
        second = Customer(name="Alice", city=cities["tokyo"])
        shop = Shop(name="namesakes", customers=[first, second])

        with caplog.at_level(logging.INFO, logger="shop_queries"):
            index = shop_queries.index_customers_by_name(shop, strategy)
        assert index == {"Alice": second}, f"Later namesake should win, got {index}"
        assert "shadowed" in caplog.text
        assert shop_queries.name_to_city(shop, strategy) == {"Alice": cities["tokyo"]}

    def test_customer_to_city(self, test_shop, cities, strategy):
        mapping = shop_queries.customer_to_city(test_shop, strategy)
        assert len(mapping) == 4
        assert mapping[test_shop.customers[3]] == cities["canberra"]
