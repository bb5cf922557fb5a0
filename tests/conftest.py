"""Pytest fixtures for Company Registry Extraction API tests.

This module provides shared fixtures for testing the FastAPI application and
the extraction engine, including the test client, a synthetic registry
configuration and HTML fixtures shaped like registry pages.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from app.core.config import RegistryConfig
from app.main import app
from app.services.registry_scraper_service import (
    RegistryScraperService,
    get_registry_scraper_service,
)

BASE_URL = "https://example.test"


@pytest.fixture
def client():
    """Create a test client for the FastAPI application.

    Returns:
        TestClient: A test client instance for making requests to the API.
    """
    return TestClient(app)


@pytest.fixture
def mock_scraper_service():
    """Replace the registry scraper service used by the routers.

    Yields:
        MagicMock: Service double whose coroutine methods are AsyncMocks.
    """
    service = MagicMock(spec=RegistryScraperService)
    service.search_companies = AsyncMock(return_value=[])
    service.get_autocomplete_suggestions = AsyncMock(return_value=[])
    service.scrape_company_by_url = AsyncMock()

    app.dependency_overrides[get_registry_scraper_service] = lambda: service
    yield service
    app.dependency_overrides.pop(get_registry_scraper_service, None)


@pytest.fixture
def registry_config(tmp_path):
    """Registry configuration pointing at a fake registry and a temp data folder."""
    return RegistryConfig(
        jurisdiction="ee",
        base_url=BASE_URL,
        search_url=f"{BASE_URL}/eng",
        data_folder=str(tmp_path),
    )


DETAIL_HTML = """
<html>
<head><title>Bolt Operations OÜ | e-Business Register</title></head>
<body>
  <div class="card">
    <div class="card-body">
      <div class="h2">General information</div>
      <div class="row">
        <div class="col-md-4 text-muted">Registry code</div>
        <div class="col font-weight-bold">14532901</div>
      </div>
      <div class="row">
        <div class="col-md-4 text-muted">Legal form</div>
        <div class="col font-weight-bold">Private limited company</div>
      </div>
      <div class="row">
        <div class="col-md-4 text-muted">Status</div>
        <div class="col font-weight-bold">Entered into the register</div>
      </div>
      <div class="row">
        <div class="col-md-4 text-muted">Registered</div>
        <div class="col font-weight-bold">21.08.2018</div>
      </div>
      <a href="/eng/company/14532901/annual-reports">Annual   reports</a>
      <a href="#">Print</a>
      <a href="">Empty</a>
      <script>var tracking = true;</script>
      <img src="/logo.png" alt="logo">
    </div>
  </div>
  <div class="card">
    <div class="card-body">
      <h2 class="h2">Right of representation</h2>
      <table id="representativesTable">
        <thead><tr><th>Name</th><th>Personal code</th><th>Role</th></tr></thead>
        <tbody>
          <tr><td>Markus  Villig</td><td>38xxxxxxxxx</td><td>Management
            board member</td></tr>
        </tbody>
      </table>
    </div>
  </div>
  <div class="card">
    <div class="card-body">
      <div class="h2">Unrelated Heading</div>
      <p>Nothing to see here.</p>
    </div>
  </div>
</body>
</html>
"""

RELATIONS_HTML = """
<html>
<head><title>Example Holding OÜ | e-Business Register</title></head>
<body>
  <div class="card">
    <div class="card-body">
      <div class="h2">Shareholders</div>
      <table class="table">
        <thead><tr><th>Name</th><th>Code</th></tr></thead>
        <tbody><tr><td>Decoy</td><td>1</td></tr></tbody>
      </table>
      <table class="table">
        <thead><tr><th>Participation</th><th>Contribution</th><th>Name</th></tr></thead>
        <tbody>
          <tr><td>100%</td><td>2500.00 EUR Sole   ownership</td><td>Bolt Technology OÜ</td></tr>
          <tr><td>0%</td><td>unknown</td><td>Someone&nbsp;Else</td></tr>
        </tbody>
      </table>
    </div>
  </div>
  <div class="card">
    <div class="card-body">
      <div class="h2">Beneficial owners</div>
      <div id="beneficiaries-table">
        <table>
          <thead><tr><th>Name</th><th>Personal code</th><th>Type of control</th></tr></thead>
          <tbody>
            <tr><td>Markus Villig</td><td>38xxxxxxxxx</td><td>Indirect
              control</td></tr>
          </tbody>
        </table>
      </div>
    </div>
  </div>
</body>
</html>
"""

SEARCH_HTML = """
<html>
<body>
  <div class="card">
    <div class="card-body">
      <a class="h2 text-primary" href="/eng/company/14532901/Bolt-Operations-OU">Bolt Operations OÜ</a>
      <div class="row">
        <div class="col-md-2">Registry code</div>
        <div class="col font-weight-bold">99999999</div>
      </div>
      <div class="row">
        <div class="col-md-2">Status</div>
        <div class="col font-weight-bold">Entered into the register</div>
      </div>
      <div class="row">
        <div class="col-md-2">Address</div>
        <div class="col font-weight-bold">Harju maakond,
          Tallinn,   Vana-Lõuna tn 15</div>
      </div>
    </div>
  </div>
  <div class="card">
    <div class="card-body">
      <a class="h2 text-primary" href="https://other.test/profile?id=10000001">Other Company AS</a>
      <div class="row">
        <div class="col-md-2">Registry code</div>
        <div class="col font-weight-bold">10000001</div>
      </div>
    </div>
  </div>
  <div class="card">
    <div class="card-body">
      <a class="h2 text-primary" href="/eng/company/12345678/Nameless">   </a>
      <div class="row">
        <div class="col-md-2">Status</div>
        <div class="col font-weight-bold">Deleted</div>
      </div>
    </div>
  </div>
</body>
</html>
"""


@pytest.fixture
def detail_html():
    """Company detail page with general information and one officer."""
    return DETAIL_HTML


@pytest.fixture
def relations_html():
    """Company detail page with shareholder and beneficial owner tables."""
    return RELATIONS_HTML


@pytest.fixture
def search_html():
    """Search results page with two named hits and one nameless anchor."""
    return SEARCH_HTML
