from fastapi import FastAPI, status
from fastapi.testclient import TestClient

from mongo_url_query.models import FetchOptions
from mongo_url_query.routers.query_routes import create_query_router

from test.test_base import TestBase, tenant


class TestQueryRoutes(TestBase):

    def setup_method(self):
        super().setup_method()
        app = FastAPI()
        app.include_router(create_query_router(
            lambda: self.products,
            FetchOptions(tenant_value=tenant, limit=20),
            prefix="/products",
            tags=["products"],
        ))
        self.client = TestClient(app)

    def test_get_items(self):
        # when
        response = self.client.get("/products/items", params={"page": 2, "sort": "id|asc"})

        # then
        assert response.status_code == status.HTTP_200_OK

        json_response = response.json()
        assert json_response["total"] == 45
        assert json_response["limit"] == 20
        assert json_response["has_next_page"] is True
        assert [item["id"] for item in json_response["items"]] == list(range(21, 41))
        assert isinstance(json_response["items"][0]["_id"], str)

    def test_get_items_with_filters(self):
        response = self.client.get(
            "/products/items",
            params=[("filter", "status|string|eq|archived"), ("filter", "price|amount|lt|10"), ("sort", "id|asc")],
        )

        assert response.status_code == status.HTTP_200_OK
        assert [item["id"] for item in response.json()["items"]] == [3, 6, 9]

    def test_get_items_count_only(self):
        response = self.client.get("/products/items?countResultOnly=true")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["total"] == 45
        assert response.json()["items"] == []

    def test_get_item(self):
        response = self.client.get("/products/item", params={"id": 5})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["name"] == "Product 05"

    def test_get_item_not_found(self):
        response = self.client.get("/products/item", params={"id": "missing"})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Item not found"

    def test_items_parameters_are_documented(self):
        # when
        response = self.client.get("/openapi.json")

        # then
        operation = response.json()["paths"]["/products/items"]["get"]
        assert "parameters" not in operation
        for name in ("page", "limit", "sort", "filter", "export", "countResultOnly"):
            assert f"`{name}" in operation["description"]
