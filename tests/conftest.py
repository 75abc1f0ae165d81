"""
Shared pytest fixtures

The store is faked with httpx.MockTransport: no test touches the network.
"""

from typing import Any, Callable, Dict, List

import httpx
import pytest

from aplus_voice.core.store_client import ADMIN_AJAX_PATH, STORE_API_PATH, StoreClient
from aplus_voice.search.strategies import SearchStrategies

BASE_URL = "https://store.test"

PRODUCTS = f"{STORE_API_PATH}/products"
CATEGORIES = f"{STORE_API_PATH}/products/categories"
INVENTORY = ADMIN_AJAX_PATH
SEARCH = "search"
HOME = "home"


SEARCH_PAGE_HTML = """
<html><body>
<ul class="products">
  <li class="product type-product instock">
    <a href="/product/2015-honda-accord-alternator/" class="woocommerce-LoopProduct-link">
      <img src="https://store.test/img/alternator.jpg">
      <h2 class="woocommerce-loop-product__title">2015 Honda Accord Alternator</h2>
      <span class="price">
        <del><span class="woocommerce-Price-amount amount">$120.00</span></del>
        <ins><span class="woocommerce-Price-amount amount">$89.99</span></ins>
      </span>
    </a>
    <span class="sku">ALT-4021</span>
  </li>
  <li class="product type-product outofstock">
    <a href="/product/2015-honda-accord-starter/">
      <h2 class="woocommerce-loop-product__title">2015 Honda Accord Starter</h2>
    </a>
  </li>
  <li class="product type-product">
    <a href="/product/mystery/"><span class="price">$5.00</span></a>
  </li>
</ul>
</body></html>
"""

GENERIC_RESULTS_HTML = """
<html><body>
<article class="post">
  <h2 class="entry-title"><a href="https://store.test/honda-accord-parting-out/">Honda Accord parting out</a></h2>
</article>
<article class="post">
  <h2 class="entry-title"><a href="/shipping/">Shipping policy</a></h2>
</article>
</body></html>
"""

LISTING_HTML = """
<html><body>
<ul class="products">
  <li class="product">
    <h2 class="woocommerce-loop-product__title">Honda Accord Alternator</h2>
    <div class="details">Part Type: Alternator</div>
    <div>Part #: 31100-5A2-A01</div>
    <div>3 in stock</div>
    <span class="price">$89.99</span>
  </li>
  <li class="product">
    <h2 class="woocommerce-loop-product__title">Honda Accord Radiator</h2>
    <div class="details">Part Type: Radiator</div>
    <span class="price">$150.00</span>
  </li>
</ul>
</body></html>
"""

MAKE_PAGE_HTML = """
<html><body>
<ul class="products">
  <li class="product">
    <h2 class="woocommerce-loop-product__title">Accord Alternator</h2>
    <div class="details">Part Type: Alternator</div>
    <span class="price">$89.99</span>
  </li>
  <li class="product">
    <h2 class="woocommerce-loop-product__title">Civic Radiator</h2>
    <div class="details">Part Type: Radiator</div>
  </li>
</ul>
</body></html>
"""

HOMEPAGE_HTML = """
<html><body>
<section class="latest-arrivals">
  <h3>Latest Arrivals</h3>
  <div class="card"><h5>2015 Honda Accord STK#4021</h5></div>
  <div class="card"><h5>2016 Honda Accord STK#4022</h5></div>
  <div class="card"><h5>2012 Ford F-150 XLT</h5><span>STK#3990</span></div>
</section>
</body></html>
"""

EMPTY_HTML = "<html><body><p>Nothing found</p></body></html>"


def store_product(name: str, price: Any = "8999", **extra) -> Dict[str, Any]:
    """A Store API product payload"""
    product = {
        "id": 101,
        "name": name,
        "permalink": f"{BASE_URL}/product/{name.lower().replace(' ', '-')}/",
        "sku": "",
        "short_description": "",
        "on_sale": False,
        "is_purchasable": True,
        "is_in_stock": True,
        "prices": {
            "price": price,
            "regular_price": price,
            "currency_minor_unit": 2,
            "currency_prefix": "$",
            "currency_suffix": "",
        },
        "images": [],
        "categories": [],
    }
    product.update(extra)
    return product


def route_key(request: httpx.Request) -> str:
    path = request.url.path
    if path == "/":
        return SEARCH if "s" in request.url.params else HOME
    return path


class FakeStore:
    """
    Canned store responses keyed by route

    Unknown routes answer 404, like a WordPress site with no such page.
    """

    def __init__(self):
        self.routes: Dict[str, Callable[[httpx.Request], httpx.Response]] = {}
        self.requests: List[httpx.Request] = []

    def json(self, key: str, data: Any, status: int = 200):
        self.routes[key] = lambda request: httpx.Response(status, json=data)

    def html(self, key: str, text: str, status: int = 200):
        self.routes[key] = lambda request: httpx.Response(status, text=text)

    def fail(self, key: str, exc_type=httpx.ConnectError):
        def raise_error(request):
            raise exc_type("upstream down", request=request)
        self.routes[key] = raise_error

    def calls(self, key: str) -> List[httpx.Request]:
        return [r for r in self.requests if route_key(r) == key]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get(route_key(request))
        if route is None:
            return httpx.Response(404, text="<html>Page not found</html>")
        return route(request)


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def store(fake_store):
    client = httpx.AsyncClient(transport=httpx.MockTransport(fake_store.handler))
    return StoreClient(base_url=BASE_URL, timeout=5.0, max_results=10, client=client)


@pytest.fixture
def strategies(store):
    return SearchStrategies(store)
