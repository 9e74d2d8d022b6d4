"""Unit tests for product routes.

Service methods are patched; these tests cover parameter validation,
status codes and the camelCase response shape.
"""

from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi import status

from app.core.exceptions import DatabaseError, NotFoundError
from app.features.products.schemas import (
    CategoryCount,
    PriceRangeResponse,
    ProductResponse,
    SaleStatistics,
)
from app.features.products.service import PRICE_BANDS, ProductService

REPORT_ENDPOINTS = [
    "/product/getData",
    "/product/stats",
    "/product/price",
    "/product/category",
]


class TestMonthValidation:
    """Month outside 1-12 is rejected by every endpoint."""

    @pytest.mark.parametrize("path", REPORT_ENDPOINTS)
    @pytest.mark.parametrize("month", ["0", "13", "-1", "abc"])
    def test_invalid_month_is_400(self, client, path, month):
        response = client.get(path, params={"month": month, "year": "2021"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"]


class TestGetData:
    """Tests for GET /product/getData."""

    def test_returns_products(self, client):
        products = [
            ProductResponse(
                id=1,
                title="Backpack",
                description="Everyday pack",
                price=109.95,
                category="men's clothing",
                sold=False,
                date_of_sale="2021-11-27T20:29:54+05:30",
            )
        ]

        with patch.object(
            ProductService, "search_products", AsyncMock(return_value=products)
        ) as mock_search:
            response = client.get("/product/getData", params={"search": "pack", "month": "11"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data[0]["title"] == "Backpack"
        assert data[0]["dateOfSale"] == "2021-11-27T20:29:54+05:30"
        assert "date_of_sale" not in data[0]
        assert mock_search.await_args.kwargs["search"] == "pack"
        assert mock_search.await_args.kwargs["month"] == 11

    def test_filters_are_optional(self, client):
        with patch.object(
            ProductService, "search_products", AsyncMock(return_value=[])
        ) as mock_search:
            response = client.get("/product/getData")

        assert response.status_code == status.HTTP_200_OK
        assert mock_search.await_args.kwargs["search"] is None
        assert mock_search.await_args.kwargs["month"] is None

    def test_invalid_month_message(self, client):
        response = client.get("/product/getData", params={"month": "13"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == (
            "Invalid month provided. It must be between 1 and 12."
        )

    def test_empty_month_is_ignored(self, client):
        with patch.object(
            ProductService, "search_products", AsyncMock(return_value=[])
        ) as mock_search:
            client.get("/product/getData", params={"month": ""})

        assert mock_search.await_args.kwargs["month"] is None

    def test_no_match_is_404(self, client, mock_db):
        empty = MagicMock()
        empty.scalars.return_value.all.return_value = []
        mock_db.execute.return_value = empty

        response = client.get("/product/getData", params={"search": "zzz"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == "No products found"

    def test_store_failure_is_500_with_raw_error(self, client):
        error = DatabaseError("Failed to fetch products.", details={"error": "boom"})

        with patch.object(ProductService, "search_products", AsyncMock(side_effect=error)):
            response = client.get("/product/getData")

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["message"] == "Failed to fetch products."
        assert response.json()["error"] == "boom"


class TestGetStats:
    """Tests for GET /product/stats."""

    def test_returns_camel_case_totals(self, client):
        stats = SaleStatistics(
            month=3,
            year=2021,
            total_sale_amount=1200.5,
            total_sold_items=7,
            total_not_sold_items=2,
        )

        with patch.object(ProductService, "compute_statistics", AsyncMock(return_value=stats)):
            response = client.get("/product/stats", params={"month": "3", "year": "2021"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "month": 3,
            "year": 2021,
            "totalSaleAmount": 1200.5,
            "totalSoldItems": 7,
            "totalNotSoldItems": 2,
        }

    @pytest.mark.parametrize(
        "params",
        [{}, {"month": "3"}, {"year": "2021"}, {"month": "3", "year": "twenty"}],
    )
    def test_missing_or_invalid_input_is_400(self, client, params):
        response = client.get("/product/stats", params=params)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Please provide a valid month (1-12) and year."

    def test_no_records_zero_filled(self, client, mock_db):
        empty = MagicMock()
        empty.one_or_none.return_value = None
        mock_db.execute.return_value = empty

        response = client.get("/product/stats", params={"month": "3", "year": "2021"})

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["totalSaleAmount"] == 0
        assert data["totalSoldItems"] == 0
        assert data["totalNotSoldItems"] == 0


class TestGetPriceRanges:
    """Tests for GET /product/price."""

    def test_no_records_returns_ten_zero_bands(self, client, mock_db):
        empty = MagicMock()
        empty.one_or_none.return_value = None
        mock_db.execute.return_value = empty

        response = client.get("/product/price", params={"month": "3", "year": "2021"})

        assert response.status_code == status.HTTP_200_OK
        price_ranges = response.json()["priceRanges"]
        assert list(price_ranges) == [band.label for band in PRICE_BANDS]
        assert all(count == 0 for count in price_ranges.values())

    def test_returns_service_histogram(self, client):
        histogram = PriceRangeResponse(
            month=3,
            year=2021,
            price_ranges={band.label: 1 for band in PRICE_BANDS},
        )

        with patch.object(
            ProductService, "compute_price_ranges", AsyncMock(return_value=histogram)
        ):
            response = client.get("/product/price", params={"month": "3", "year": "2021"})

        assert response.json()["priceRanges"]["901-above"] == 1

    @pytest.mark.parametrize("year", ["1899", "3000", "", "abc"])
    def test_invalid_year_is_400(self, client, year):
        response = client.get("/product/price", params={"month": "3", "year": year})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Please provide a valid year."

    def test_missing_month_is_400(self, client):
        response = client.get("/product/price", params={"year": "2021"})

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Please provide a valid month (1-12)."


class TestGetCategoryDistribution:
    """Tests for GET /product/category."""

    def test_returns_list_of_categories(self, client):
        distribution = [
            CategoryCount(category="men's clothing", item_count=3),
            CategoryCount(category="women's clothing", item_count=0),
            CategoryCount(category="electronics", item_count=1),
            CategoryCount(category="jewelry", item_count=0),
        ]

        with patch.object(
            ProductService,
            "compute_category_distribution",
            AsyncMock(return_value=distribution),
        ):
            response = client.get("/product/category", params={"month": "3"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()[0] == {"category": "men's clothing", "itemCount": 3}
        assert len(response.json()) == 4

    def test_missing_month_is_400(self, client):
        response = client.get("/product/category")

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["message"] == "Please provide a valid month (1-12)."

    def test_not_found_error_passthrough(self, client):
        with patch.object(
            ProductService,
            "compute_category_distribution",
            AsyncMock(side_effect=NotFoundError("gone")),
        ):
            response = client.get("/product/category", params={"month": "3"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
