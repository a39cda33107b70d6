"""Admin seeding, bulk insert, wipe and stats."""

from schemas import Product
from services.admin import SAMPLE_PRODUCTS, validate_entry


def valid(i):
    return {"name": f"Bulk {i}", "category": "Bulk", "price": 1.5 * i, "description": "bulk"}


def test_seed_twice_is_idempotent(client):
    first = client.post("/api/admin/sample-products")
    assert first.status_code == 201
    assert first.json()["createdCount"] == len(SAMPLE_PRODUCTS) == 10
    assert first.json()["existingCount"] == 0
    assert len(first.json()["createdProducts"]) == 10

    second = client.post("/api/admin/sample-products")
    assert second.status_code == 200
    assert second.json() == {
        "message": "All sample products already exist",
        "existingCount": 10,
        "createdCount": 0,
    }
    assert client.get("/api/products").json()["total"] == 10


def test_seed_fills_only_missing(client, make_product):
    make_product(name="Jeans", category="Clothing")
    body = client.post("/api/admin/sample-products").json()
    assert body["existingCount"] == 1
    assert body["createdCount"] == 9


def test_bulk_insert_one_bad_entry_rejects_all(client, store):
    entries = [valid(i) for i in range(5)]
    entries.insert(3, {"name": "Bad", "category": "Bulk", "price": -4, "description": "x"})
    res = client.post("/api/admin/bulk-products", json=entries)
    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Validation errors"
    assert body["errors"] == ["Product at index 3: Price must be a positive number"]
    assert store.collection("product").count_documents({}) == 0


def test_bulk_insert_reports_totals_and_skips_existing(client, make_product):
    make_product(name="Bulk 1")
    entries = [valid(i) for i in range(4)] + [valid(2)]
    res = client.post("/api/admin/bulk-products", json=entries)
    assert res.status_code == 201
    body = res.json()
    assert body["totalRequested"] == 5
    assert body["existingCount"] == 1
    assert body["createdCount"] == 3
    assert body["skippedCount"] == 2
    assert body["skippedProducts"] == ["Bulk 1", "Bulk 2"]
    assert sorted(p["name"] for p in body["createdProducts"]) == ["Bulk 0", "Bulk 2", "Bulk 3"]


def test_bulk_insert_all_existing(client):
    client.post("/api/admin/bulk-products", json=[valid(1)])
    res = client.post("/api/admin/bulk-products", json=[valid(1)])
    assert res.status_code == 200
    assert res.json()["message"] == "All products already exist"
    assert res.json()["createdCount"] == 0


def test_bulk_insert_rejects_non_list_and_empty(client):
    res = client.post("/api/admin/bulk-products", json={"name": "x"})
    assert res.status_code == 400
    assert res.json()["message"] == "Request body must be an array of products"

    res = client.post("/api/admin/bulk-products", json=[])
    assert res.status_code == 400
    assert res.json()["message"] == "Array cannot be empty"


def test_validate_entry_messages():
    assert validate_entry(0, valid(1)) == ""
    assert validate_entry(2, {"name": "x", "category": "y", "price": "3", "description": "z"}) == (
        "Product at index 2: Missing required fields (name, category, price, description)"
    )
    assert validate_entry(1, {"name": " ", "category": "y", "price": 3, "description": "z"}).startswith(
        "Product at index 1: Missing"
    )
    assert validate_entry(4, {"name": "x", "category": "y", "price": True, "description": "z"}).startswith(
        "Product at index 4: Missing"
    )
    assert validate_entry(5, "nope") == "Product at index 5: Must be an object"


def test_bulk_trims_and_normalizes(client):
    client.post("/api/admin/bulk-products", json=[
        {"name": " Trimmed ", "category": " Cat ", "price": 3, "description": " d ", "image": ""},
    ])
    product = client.get("/api/products").json()["products"][0]
    assert product["name"] == "Trimmed"
    assert product["category"] == "Cat"
    assert product["image"] is None


def test_clear_all(client):
    client.post("/api/admin/sample-products")
    res = client.delete("/api/admin/clear-all")
    assert res.json() == {"message": "All products cleared successfully", "deletedCount": 10}
    assert client.get("/api/products").json()["total"] == 0


def test_stats_empty_catalog(client):
    assert client.get("/api/admin/stats").json() == {
        "totalProducts": 0,
        "totalCategories": 0,
        "categories": [],
        "productsWithImages": 0,
        "averagePrice": 0,
    }


def test_stats(client, make_product):
    make_product(category="Home", price=10, image="http://img/a.png")
    make_product(category="Books", price=20)
    make_product(category="Home", price=16)
    assert client.get("/api/admin/stats").json() == {
        "totalProducts": 3,
        "totalCategories": 2,
        "categories": ["Books", "Home"],
        "productsWithImages": 1,
        "averagePrice": 15.33,
    }


def test_non_finite_price_is_rejected_per_index(client, store):
    for price in (float("nan"), float("inf"), float("-inf")):
        assert validate_entry(3, {"name": "x", "category": "y", "price": price, "description": "z"}) == (
            "Product at index 3: Price must be a positive number"
        )

    res = client.post(
        "/api/admin/bulk-products",
        content='[{"name": "x", "category": "y", "price": NaN, "description": "z"}]',
        headers={"Content-Type": "application/json"},
    )
    assert res.status_code == 400
    assert res.json() == {
        "message": "Validation errors",
        "errors": ["Product at index 0: Price must be a positive number"],
    }
    assert store.count(Product) == 0


def test_store_average(store, make_product):
    assert store.average(Product, "price") == 0
    make_product(price=4)
    make_product(price=7)
    assert store.average(Product, "price") == 5.5
