"""
Test suite for the CSV upload endpoint.

System role: Verification of multipart CSV ingestion
"""

from fastapi.testclient import TestClient

from restaurant_rag.api.deps import get_csv_service
from restaurant_rag.application.services.csv_service import CsvIngestionService

PRODUCTS_CSV = b"Item Name,Category,Price,Cost\nLatte,Coffee,120,45\nMocha,Coffee,140,50\n"


def upload(client: TestClient, data: bytes = PRODUCTS_CSV, **form):
    return client.post(
        "/api/v1/tenants/fika/uploads/csv",
        files={"file": ("products.csv", data, "text/csv")},
        data=form,
    )


class TestCsvUploadEndpoint:
    """POST /tenants/{tenant_id}/uploads/csv"""

    def test_upload_detects_category(self, client: TestClient) -> None:
        response = upload(client)

        assert response.status_code == 201
        body = response.json()
        assert body["category"] == "products"
        assert body["rows_ingested"] == 2
        assert body["filename"] == "products.csv"

    def test_reupload_replaces(self, client: TestClient) -> None:
        upload(client)

        response = upload(client)

        assert response.json()["replaced_documents"] == 1
        listing = client.get("/api/v1/tenants/fika/documents").json()
        assert listing["total"] == 1

    def test_explicit_category(self, client: TestClient) -> None:
        response = upload(client, category="inventory")

        assert response.json()["category"] == "inventory"

    def test_bad_category_is_400(self, client: TestClient) -> None:
        response = upload(client, category="receipts")

        assert response.status_code == 400
        assert response.json()["detail"]["details"]["field"] == "category"

    def test_empty_file_is_400(self, client: TestClient) -> None:
        assert upload(client, data=b"").status_code == 400

    def test_missing_file_is_422(self, client: TestClient) -> None:
        response = client.post("/api/v1/tenants/fika/uploads/csv")

        assert response.status_code == 422

    def test_oversize_file_is_400_without_reading_it_all(
        self, app, document_service, tenants
    ) -> None:
        # Arrange
        capped = CsvIngestionService(documents=document_service, tenants=tenants, max_bytes=10)
        ingest_csv = capped.ingest_csv
        received: list[int] = []

        async def recording_ingest(**kwargs):
            received.append(len(kwargs["data"]))
            return await ingest_csv(**kwargs)

        capped.ingest_csv = recording_ingest
        app.dependency_overrides[get_csv_service] = lambda: capped

        # Act
        response = upload(TestClient(app))

        # Assert
        assert response.status_code == 400
        assert response.json()["detail"]["details"]["field"] == "file"
        assert received == [11]
