"""
Pytest configuration: puts the project root on the Python path and provides
shop fixtures shared by the test modules.
"""

import sys
from pathlib import Path

# Add the parent directory to the Python path
parent_dir = Path(__file__).parent.parent
if str(parent_dir) not in sys.path:
    sys.path.insert(0, str(parent_dir))

import pytest

from models import City, Customer, EvaluationStrategy, Order, Product, QuerySettings, Shop, configure


@pytest.fixture(autouse=True)
def reset_settings():
    """Every test starts from the default settings"""
    configure(**QuerySettings().model_dump())
    yield
    configure(**QuerySettings().model_dump())


@pytest.fixture(params=list(EvaluationStrategy), ids=lambda s: s.value)
def strategy(request):
    """Runs a test once per evaluation strategy"""
    return request.param


@pytest.fixture
def small_shop():
    """Alice (X) with one delivered order [P1 $5, P2 $10]; Bob (Y) with one undelivered order [P3 $20]"""
    x, y = City(name="X"), City(name="Y")
    p1 = Product(name="P1", price=5.0)
    p2 = Product(name="P2", price=10.0)
    p3 = Product(name="P3", price=20.0)
    alice = Customer(name="Alice", city=x, orders=[Order(products=[p1, p2], is_delivered=True)])
    bob = Customer(name="Bob", city=y, orders=[Order(products=[p3], is_delivered=False)])
    return Shop(name="small shop", customers=[alice, bob])


@pytest.fixture
def products():
    return {
        "idea": Product(name="IntelliJ IDEA Ultimate", price=199.0),
        "rider": Product(name="Rider", price=149.0),
        "dotmemory": Product(name="dotMemory", price=129.0),
        "webstorm": Product(name="WebStorm", price=69.0),
    }


@pytest.fixture
def cities():
    return {
        "canberra": City(name="Canberra"),
        "vancouver": City(name="Vancouver"),
        "budapest": City(name="Budapest"),
        "tokyo": City(name="Tokyo"),
    }


@pytest.fixture
def test_shop(products, cities):
    """A shop with overlapping orders across four customers"""
    idea, rider, dotmemory, webstorm = (
        products["idea"], products["rider"], products["dotmemory"], products["webstorm"]
    )
    return Shop(name="test shop", customers=[
        Customer(name="Lucas", city=cities["canberra"], orders=[
            Order(products=[rider, idea], is_delivered=False),
        ]),
        Customer(name="Cooper", city=cities["vancouver"], orders=[
            Order(products=[idea, idea], is_delivered=True),
            Order(products=[dotmemory], is_delivered=False),
            Order(products=[rider, webstorm], is_delivered=False),
        ]),
        Customer(name="Nathan", city=cities["budapest"], orders=[
            Order(products=[rider, idea], is_delivered=True),
            Order(products=[webstorm], is_delivered=True),
        ]),
        Customer(name="Asuka", city=cities["canberra"], orders=[
            Order(products=[idea, rider, dotmemory], is_delivered=True),
        ]),
    ])
