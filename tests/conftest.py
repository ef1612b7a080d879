"""
Pytest configuration and shared fixtures.
"""
import pytest


SEARCH_URL = "https://listado.example.com/inmuebles/venta"


MERCADO_LIBRE_HTML = """
<html>
<head><title>Departamentos en venta</title></head>
<body>
<ol class="ui-search-layout">
  <li class="ui-search-layout__item">
    <div class="ui-search-result__wrapper">
      <a class="ui-search-link" href="/MLA-1001-departamento">
        <h2 class="ui-search-item__title"> Departamento 3 ambientes en Palermo </h2>
      </a>
      <span class="andes-money-amount__currency-symbol">US$</span>
      <span class="andes-money-amount__fraction">185.000</span>
      <span class="ui-search-item__location-location">Palermo, Capital Federal</span>
      <ul class="ui-search-card-attributes">
        <li>3 ambientes</li>
        <li>75 m² cubiertos</li>
      </ul>
    </div>
  </li>
  <li class="ui-search-layout__item">
    <div class="ui-search-result__wrapper">
      <a class="ui-search-link" href="MLA-1002-casa">
        <h2 class="ui-search-item__title">Casa con jardín en Belgrano</h2>
      </a>
      <span class="andes-money-amount__currency-symbol">$</span>
      <span class="andes-money-amount__fraction">420,500,000</span>
      <span class="ui-search-item__location-location">Belgrano, Capital Federal</span>
      <ul class="ui-search-card-attributes">
        <li>5 ambientes</li>
        <li>210 m² totales</li>
      </ul>
    </div>
  </li>
  <li class="ui-search-layout__item">
    <div class="ui-search-result__wrapper">
      <a class="ui-search-link" href="https://articulo.example.com/MLA-1003">
        <h2 class="ui-search-item__title">Monoambiente en Recoleta</h2>
      </a>
      <span class="andes-money-amount__currency-symbol">US$</span>
      <span class="andes-money-amount__fraction">79.900</span>
      <span class="ui-search-item__location-location">Recoleta, Capital Federal</span>
      <ul class="ui-search-card-attributes">
        <li>1 ambiente</li>
        <li>32 m² cubiertos</li>
      </ul>
    </div>
  </li>
</ol>
</body>
</html>
"""


ZONAPROP_HTML = """
<html>
<body>
<div class="postings-container">
  <div data-qa="posting-card" class="postingCard">
    <h2>Departamento luminoso con balcón</h2>
    <div data-qa="POSTING_CARD_PRICE">USD 120.000</div>
    <div data-qa="POSTING_CARD_LOCATION">Caballito, Capital Federal</div>
    <div data-qa="POSTING_CARD_FEATURES">
      <span>80 m² tot.</span>
      <span>3 amb.</span>
      <span>2 dorm.</span>
    </div>
    <a data-qa="posting-card-link" href="/propiedades/depto-caballito-1.html">Ver</a>
  </div>
  <div data-qa="posting-card" class="postingCard">
    <h2>PH reciclado sin expensas</h2>
    <div data-qa="POSTING_CARD_PRICE">$ 98.000.000</div>
    <div data-qa="POSTING_CARD_LOCATION">Villa Crespo, Capital Federal</div>
    <div data-qa="POSTING_CARD_FEATURES"><span>95 m² tot.</span> <span>4 amb.</span></div>
    <a data-qa="posting-card-link" href="/propiedades/ph-villa-crespo-2.html">Ver</a>
  </div>
</div>
</body>
</html>
"""


GENERIC_HTML = """
<html>
<body>
<section>
  <article class="listing">
    <h3>Chalet frente al mar</h3>
    <span class="listing-price">250.000</span>
    <span class="currency-code">EUR</span>
    <p class="street-address">Av. Costanera 1200, Mar del Plata</p>
    <p class="listing-features">4 dormitorios   2 baños</p>
    <a href="/chalet-costanera">Detalle</a>
  </article>
</section>
</body>
</html>
"""


UNKNOWN_HTML = """
<html>
<body>
<div class="news">
  <h1>Market report</h1>
  <p>No listings here.</p>
</div>
</body>
</html>
"""


class FakeResponse:
    """Minimal stand-in for an aiohttp response used as an async context manager."""

    def __init__(self, status=200, body="", content_type="text/html; charset=utf-8"):
        self.status = status
        self.headers = {"Content-Type": content_type} if content_type else {}
        self._body = body

    async def text(self, errors="strict"):
        return self._body

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records requests and returns a canned response, or raises a canned error."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def _request(self, method, url, kwargs):
        self.requests.append((method, url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def get(self, url, **kwargs):
        return self._request("GET", url, kwargs)

    def post(self, url, **kwargs):
        return self._request("POST", url, kwargs)


@pytest.fixture
def search_url():
    return SEARCH_URL


@pytest.fixture
def mercado_libre_html():
    return MERCADO_LIBRE_HTML


@pytest.fixture
def zonaprop_html():
    return ZONAPROP_HTML


@pytest.fixture
def generic_html():
    return GENERIC_HTML


@pytest.fixture
def unknown_html():
    return UNKNOWN_HTML


@pytest.fixture
def html_session():
    """Build a FakeSession that serves the given HTML with a 200 status."""
    def _make(body, status=200, content_type="text/html; charset=utf-8"):
        return FakeSession(FakeResponse(status=status, body=body, content_type=content_type))
    return _make
