"""
Test suite for CSV ingestion.

Covers header normalisation, category detection, synonym resolution, row
rendering and the upload flow including same-filename replacement.

System role: Verification of tabular ingestion
"""

from unittest.mock import AsyncMock

import pytest

from restaurant_rag.application.services import CsvIngestionService, DocumentService
from restaurant_rag.application.services.csv_service import (
    ResolvedField,
    detect_category,
    format_money,
    normalize_header,
    resolve_fields,
    row_to_text,
)
from restaurant_rag.core.exceptions import EmbeddingProviderError, ValidationError
from restaurant_rag.models.csv_upload import CsvCategory
from restaurant_rag.models.document import DocumentSource

PRODUCTS_CSV = (
    "Item Name,Category,Price,Cost,SKU\n"
    "Latte,Coffee,120,45.5,LAT-01\n"
    "Cinnamon Bun,Pastry,\"1,095\",30,CIN-02\n"
).encode()

SALES_CSV = (
    "Receipt Number,Date,Item Name,Quantity,Total Money,Payment Type\n"
    "1-1001,2024-03-01,Latte,2,240,Cash\n"
).encode()

INVENTORY_CSV = (
    "Item Name,SKU,In Stock,Low Stock Level\n"
    "Oat Milk,OAT-1,4,6\n"
).encode()


class TestCsvHelpers:
    """Test suite for the pure CSV helpers."""

    @pytest.mark.parametrize(
        "raw,expected",
        [("Item Name", "item_name"), ("  PRICE ", "price"), ("Low  Stock\tLevel", "low_stock_level")],
    )
    def test_normalize_header(self, raw: str, expected: str) -> None:
        assert normalize_header(raw) == expected

    @pytest.mark.parametrize(
        "headers,expected",
        [
            ({"receipt_number", "total_money"}, CsvCategory.SALES),
            ({"item_name", "in_stock"}, CsvCategory.INVENTORY),
            ({"item_name", "stock", "price", "category"}, CsvCategory.PRODUCTS),
            ({"item_name", "price", "cost"}, CsvCategory.PRODUCTS),
            ({"item_name", "price"}, None),
            ({"foo", "bar"}, None),
        ],
    )
    def test_detect_category(self, headers: set[str], expected) -> None:
        assert detect_category(headers) == expected

    def test_first_synonym_wins(self) -> None:
        fields = resolve_fields(["name", "item_name", "price"], CsvCategory.PRODUCTS)

        assert fields[0] == ResolvedField("Product", "item_name", False)
        assert fields[1] == ResolvedField("Price", "price", True)

    def test_format_money(self) -> None:
        assert format_money("1,250.5", "PHP") == "PHP 1250.50"
        assert format_money("n/a", "PHP") is None

    def test_row_to_text_labels_fields(self) -> None:
        # Arrange
        fields = resolve_fields(["item_name", "category", "price"], CsvCategory.PRODUCTS)
        row = {"item_name": "Latte", "category": "Coffee", "price": "120"}

        # Act
        text = row_to_text(row, fields, "Fika Cafe", "PHP")

        # Assert
        assert text == "[Fika Cafe] | Product: Latte | Category: Coffee | Price: PHP 120.00"

    def test_row_to_text_skips_empty_and_unparseable_values(self) -> None:
        fields = resolve_fields(["item_name", "price", "sku"], CsvCategory.PRODUCTS)
        row = {"item_name": "Latte", "price": "free", "sku": ""}

        assert row_to_text(row, fields, "Fika Cafe", "PHP") == "[Fika Cafe] | Product: Latte"

    def test_row_to_text_falls_back_to_raw_columns(self) -> None:
        row = {"colour": "red", "size": " L ", "note": ""}

        text = row_to_text(row, [], "Fika Cafe", "PHP")

        assert text == "[Fika Cafe] | colour: red | size: L"


class TestCsvIngestionService:
    """Test suite for CsvIngestionService.ingest_csv()."""

    @pytest.mark.asyncio
    async def test_products_upload_stores_one_chunk_per_row(
        self, csv_service: CsvIngestionService, document_service: DocumentService, provider
    ) -> None:
        # Act
        result = await csv_service.ingest_csv("fika", "products.csv", PRODUCTS_CSV)

        # Assert
        assert result.category == CsvCategory.PRODUCTS
        assert result.rows_ingested == 2
        assert result.replaced_documents == 0
        assert provider.calls[-1] == [
            "[Fika Cafe] | Product: Latte | Category: Coffee | Price: PHP 120.00"
            " | Cost: PHP 45.50 | SKU: LAT-01",
            "[Fika Cafe] | Product: Cinnamon Bun | Category: Pastry | Price: PHP 1095.00"
            " | Cost: PHP 30.00 | SKU: CIN-02",
        ]
        documents = await document_service.list_documents("fika")
        assert documents[0].title == "products.csv"
        assert documents[0].source == DocumentSource.CSV
        assert documents[0].tags == ["products"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data,category",
        [(SALES_CSV, CsvCategory.SALES), (INVENTORY_CSV, CsvCategory.INVENTORY)],
    )
    async def test_category_detected_from_headers(
        self, csv_service: CsvIngestionService, data: bytes, category: CsvCategory
    ) -> None:
        result = await csv_service.ingest_csv("fika", "export.csv", data)

        assert result.category == category
        assert result.rows_ingested == 1

    @pytest.mark.asyncio
    async def test_sales_row_rendering(self, csv_service: CsvIngestionService, provider) -> None:
        await csv_service.ingest_csv("harveys_wings", "sales.csv", SALES_CSV)

        assert provider.calls[-1] == [
            "[Harvey's Wings] | Receipt: 1-1001 | Date: 2024-03-01 | Total: PHP 240.00"
            " | Payment: Cash | Item: Latte | Qty: 2"
        ]

    @pytest.mark.asyncio
    async def test_explicit_category_overrides_detection(
        self, csv_service: CsvIngestionService
    ) -> None:
        result = await csv_service.ingest_csv("fika", "stock.csv", PRODUCTS_CSV, category="Inventory")

        assert result.category == CsvCategory.INVENTORY

    @pytest.mark.asyncio
    async def test_reupload_replaces_previous_document(
        self, csv_service: CsvIngestionService, document_service: DocumentService
    ) -> None:
        # Arrange
        first = await csv_service.ingest_csv("fika", "products.csv", PRODUCTS_CSV)

        # Act
        second = await csv_service.ingest_csv("fika", "products.csv", PRODUCTS_CSV)

        # Assert
        assert second.replaced_documents == 1
        documents = await document_service.list_documents("fika")
        assert [d.id for d in documents] == [second.document_id]
        assert await document_service.count_chunks("fika", first.document_id) == 0

    @pytest.mark.asyncio
    async def test_failed_reupload_keeps_previous_document(
        self, csv_service: CsvIngestionService, document_service: DocumentService, monkeypatch
    ) -> None:
        # Arrange
        first = await csv_service.ingest_csv("fika", "products.csv", PRODUCTS_CSV)
        monkeypatch.setattr(
            document_service.embedder.provider,
            "embed_batch",
            AsyncMock(side_effect=EmbeddingProviderError("provider down")),
        )

        # Act
        with pytest.raises(EmbeddingProviderError):
            await csv_service.ingest_csv("fika", "products.csv", PRODUCTS_CSV)

        # Assert
        documents = await document_service.list_documents("fika")
        assert [d.id for d in documents] == [first.document_id]

    @pytest.mark.asyncio
    async def test_utf8_bom_is_ignored(self, csv_service: CsvIngestionService) -> None:
        result = await csv_service.ingest_csv("fika", "products.csv", b"\xef\xbb\xbf" + PRODUCTS_CSV)

        assert result.category == CsvCategory.PRODUCTS

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "data,category",
        [
            (b"", None),
            (b"Item Name,Price,Cost\n", None),
            (b"foo,bar\n1,2\n", None),
            (PRODUCTS_CSV, "receipts"),
            (b"\xff\xfe\x00bad", None),
        ],
    )
    async def test_bad_uploads_rejected(
        self, csv_service: CsvIngestionService, data: bytes, category
    ) -> None:
        with pytest.raises(ValidationError):
            await csv_service.ingest_csv("fika", "upload.csv", data, category=category)

    @pytest.mark.asyncio
    async def test_oversize_upload_rejected(self, document_service, tenants) -> None:
        service = CsvIngestionService(document_service, tenants, max_bytes=10)

        with pytest.raises(ValidationError) as exc_info:
            await service.ingest_csv("fika", "products.csv", PRODUCTS_CSV)

        assert exc_info.value.details["field"] == "file"

    @pytest.mark.asyncio
    async def test_unknown_tenant_rejected(self, csv_service: CsvIngestionService) -> None:
        with pytest.raises(ValidationError):
            await csv_service.ingest_csv("nowhere", "products.csv", PRODUCTS_CSV)
