"""HTTP tests for /api/products and /api/seed."""

CSV_HEADER = "name,unit,category,brand,stock,status,image\n"

MILK = {
    "name": "Milk",
    "unit": "l",
    "category": "Dairy",
    "brand": "FreshFarm",
    "stock": 10,
    "status": "In Stock",
}


def _upload(client, body: str):
    return client.post(
        "/api/products/import",
        files={"file": ("products.csv", body.encode("utf-8"), "text/csv")},
    )


class TestCrud:
    def test_create_list_get(self, client):
        res = client.post("/api/products", json=MILK)
        assert res.status_code == 201
        milk = res.json()
        assert milk["image"] is None

        assert [p["name"] for p in client.get("/api/products").json()] == ["Milk"]
        assert client.get(f"/api/products/{milk['id']}").json()["stock"] == 10

    def test_create_duplicate_is_conflict(self, client):
        client.post("/api/products", json=MILK)
        res = client.post("/api/products", json={**MILK, "name": "mILK"})
        assert res.status_code == 409
        assert res.json()["detail"] == "Name already exists"

    def test_negative_stock_is_bad_request(self, client):
        res = client.post("/api/products", json={**MILK, "stock": -1})
        assert res.status_code == 400
        assert res.json()["detail"] == "Validation failed"

    def test_stock_above_storage_range_is_bad_request(self, client):
        res = client.post("/api/products", json={**MILK, "stock": 10**20})
        assert res.status_code == 400
        assert res.json()["detail"] == "Validation failed"
        assert client.get("/api/products").json() == []

    def test_update_with_stock_above_storage_range_is_bad_request(self, client):
        milk = client.post("/api/products", json=MILK).json()
        res = client.put(f"/api/products/{milk['id']}", json={**MILK, "stock": 10**20})
        assert res.status_code == 400
        assert client.get(f"/api/products/{milk['id']}").json()["stock"] == 10
        assert client.get(f"/api/products/{milk['id']}/history").json() == []

    def test_blank_name_is_bad_request(self, client):
        res = client.post("/api/products", json={**MILK, "name": "  "})
        assert res.status_code == 400

    def test_missing_product_is_not_found(self, client):
        assert client.get("/api/products/123").status_code == 404
        assert client.put("/api/products/123", json=MILK).status_code == 404
        assert client.delete("/api/products/123").status_code == 404

    def test_bad_sort_column(self, client):
        res = client.get("/api/products", params={"sortBy": "bogus"})
        assert res.status_code == 400

    def test_search(self, client):
        client.post("/api/products", json=MILK)
        client.post("/api/products", json={**MILK, "name": "Oat Milk"})
        client.post("/api/products", json={**MILK, "name": "Bread"})
        names = [p["name"] for p in client.get("/api/products/search", params={"name": "milk"}).json()]
        assert names == ["Oat Milk", "Milk"]


class TestUpdateAndHistory:
    def test_unchanged_stock_no_history(self, client):
        milk = client.post("/api/products", json=MILK).json()
        res = client.put(f"/api/products/{milk['id']}", json={**MILK, "status": "Fresh"})
        assert res.status_code == 200
        assert res.json()["status"] == "Fresh"
        assert client.get(f"/api/products/{milk['id']}/history").json() == []

    def test_changed_stock_logs_default_actor(self, client):
        milk = client.post("/api/products", json=MILK).json()
        client.put(f"/api/products/{milk['id']}", json={**MILK, "stock": 7})
        (entry,) = client.get(f"/api/products/{milk['id']}/history").json()
        assert (entry["old_stock"], entry["new_stock"], entry["changed_by"]) == (10, 7, "admin")
        assert entry["product_id"] == milk["id"]

    def test_changed_by_from_request(self, client):
        milk = client.post("/api/products", json=MILK).json()
        client.put(f"/api/products/{milk['id']}", json={**MILK, "stock": 2, "changedBy": "dana"})
        (entry,) = client.get(f"/api/products/{milk['id']}/history").json()
        assert entry["changed_by"] == "dana"

    def test_rename_conflict(self, client):
        client.post("/api/products", json=MILK)
        bread = client.post("/api/products", json={**MILK, "name": "Bread"}).json()
        res = client.put(f"/api/products/{bread['id']}", json={**MILK, "name": "MILK"})
        assert res.status_code == 409

    def test_history_kept_after_delete(self, client):
        milk = client.post("/api/products", json=MILK).json()
        client.put(f"/api/products/{milk['id']}", json={**MILK, "stock": 1})
        assert client.delete(f"/api/products/{milk['id']}").json() == {"success": True}
        assert len(client.get(f"/api/products/{milk['id']}/history").json()) == 1


class TestImportExport:
    def test_import_report(self, client):
        res = _upload(client, "name,stock\nMilk,10\nmilk,5\n,3\n")
        assert res.status_code == 200
        report = res.json()
        milk_id = report["details"]["added"][0]["id"]
        assert report["added"] == 1
        assert report["skipped"] == 1
        assert report["duplicates"] == [{"name": "milk", "existing_id": milk_id}]
        assert report["details"]["skipped"][0]["reason"] == "missing name"

    def test_import_without_file(self, client):
        res = client.post("/api/products/import")
        assert res.status_code == 400
        assert res.json()["detail"] == "No file uploaded"

    def test_import_without_name_column(self, client):
        res = _upload(client, "title,stock\nMilk,1\n")
        assert res.status_code == 400

    def test_export(self, client):
        client.post("/api/products", json=MILK)
        res = client.get("/api/products/export")
        assert res.status_code == 200
        assert res.headers["content-type"].startswith("text/csv")
        assert 'filename="products.csv"' in res.headers["content-disposition"]
        assert res.text.splitlines() == [CSV_HEADER.strip(), "Milk,l,Dairy,FreshFarm,10,In Stock,"]

    def test_export_import_round_trip(self, client):
        client.post("/api/seed")
        body = client.get("/api/products/export").text
        for p in client.get("/api/products").json():
            client.delete(f"/api/products/{p['id']}")

        assert _upload(client, body).json()["added"] == 3
        assert client.get("/api/products/export").text.splitlines()[1:] == body.splitlines()[1:]


def test_seed(client):
    assert client.post("/api/seed").json() == {"ok": True, "created": 3}
    assert client.post("/api/seed").json()["created"] == 0
