"""
CSV ingestion service.

Turns a point-of-sale export (products, sales or inventory) into one
document whose chunks are the rows. Headers are normalised, the category
is detected from them when not given, and each semantic field is resolved
once per file from an ordered list of column synonyms. Rows bypass the
chunker and go straight to embedding and storage.

Dependencies: csv (stdlib), restaurant_rag.application.services.document_service
System role: Tabular ingestion collaborator
"""

import csv
import io
import logging
import re
from dataclasses import dataclass

from restaurant_rag.application.services.document_service import DocumentService
from restaurant_rag.application.services.validation import validate_tenant
from restaurant_rag.configs.tenants import TenantSettings
from restaurant_rag.core.exceptions import ValidationError
from restaurant_rag.models.chunk import ChunkMetadata
from restaurant_rag.models.csv_upload import CsvCategory, CsvIngestResult
from restaurant_rag.models.document import DocumentSource, DocumentType

logger = logging.getLogger(__name__)

_WHITESPACE = re.compile(r"\s+")


@dataclass(frozen=True)
class FieldSpec:
    """A labelled semantic field and the column names that may carry it."""

    label: str
    synonyms: tuple[str, ...]
    money: bool = False


@dataclass(frozen=True)
class ResolvedField:
    label: str
    column: str
    money: bool


CATEGORY_FIELDS: dict[CsvCategory, tuple[FieldSpec, ...]] = {
    CsvCategory.PRODUCTS: (
        FieldSpec("Product", ("item_name", "name", "product", "product_name")),
        FieldSpec("Category", ("category",)),
        FieldSpec("Price", ("price", "selling_price"), money=True),
        FieldSpec("Cost", ("cost",), money=True),
        FieldSpec("SKU", ("sku",)),
        FieldSpec("Variant", ("variant_name", "variant")),
        FieldSpec("Description", ("description",)),
    ),
    CsvCategory.SALES: (
        FieldSpec("Receipt", ("receipt_number", "receipt_no", "receipt")),
        FieldSpec("Date", ("date", "created_at", "receipt_date")),
        FieldSpec("Total", ("total", "total_money", "gross_sales", "net_sales"), money=True),
        FieldSpec("Payment", ("payment_type", "payment_method")),
        FieldSpec("Item", ("item_name", "item")),
        FieldSpec("Qty", ("quantity", "qty")),
        FieldSpec("Employee", ("employee", "cashier")),
        FieldSpec("Store", ("store", "store_name")),
    ),
    CsvCategory.INVENTORY: (
        FieldSpec("Item", ("item_name", "name", "product")),
        FieldSpec("SKU", ("sku",)),
        FieldSpec("Stock", ("stock", "quantity", "in_stock", "stock_level")),
        FieldSpec("Store", ("store", "store_name")),
        FieldSpec("Low Stock Alert", ("low_stock_level", "low_stock")),
        FieldSpec("Variant", ("variant_name", "variant")),
    ),
}

SALES_MARKERS = frozenset(
    {"receipt_number", "receipt_no", "receipt", "payment_type", "payment_method",
     "gross_sales", "net_sales", "total_money"}
)
STOCK_MARKERS = frozenset({"stock", "in_stock", "stock_level", "low_stock_level"})
PRICE_MARKERS = frozenset({"price", "selling_price"})
PRODUCT_MARKERS = frozenset({"cost", "category"})


def normalize_header(header: str) -> str:
    """Lower-case, trim and replace inner whitespace with underscores."""
    return _WHITESPACE.sub("_", header.strip().lower())


def detect_category(headers: set[str]) -> CsvCategory | None:
    """
    Infer the export category from normalised headers.

    Rules, in order: sales columns => sales; stock columns without a price
    column => inventory; price plus cost/category => products.
    """
    if headers & SALES_MARKERS:
        return CsvCategory.SALES
    if headers & STOCK_MARKERS and not headers & PRICE_MARKERS:
        return CsvCategory.INVENTORY
    if headers & PRICE_MARKERS and headers & PRODUCT_MARKERS:
        return CsvCategory.PRODUCTS
    return None


def resolve_fields(headers: list[str], category: CsvCategory) -> list[ResolvedField]:
    """Pick, per semantic field, the first synonym present in the headers."""
    present = set(headers)
    resolved = []
    for spec in CATEGORY_FIELDS[category]:
        column = next((name for name in spec.synonyms if name in present), None)
        if column is not None:
            resolved.append(ResolvedField(spec.label, column, spec.money))
    return resolved


def format_money(value: str, currency: str) -> str | None:
    try:
        amount = float(value.replace(",", ""))
    except ValueError:
        return None
    return f"{currency} {amount:.2f}"


def row_to_text(
    row: dict[str, str],
    fields: list[ResolvedField],
    tenant_display: str,
    currency: str,
) -> str:
    """
    Render one row as a passage.

    Falls back to every non-empty ``column: value`` pair when none of the
    resolved fields has a value.
    """
    parts = [f"[{tenant_display}]"]
    for field in fields:
        value = (row.get(field.column) or "").strip()
        if not value:
            continue
        if field.money:
            value = format_money(value, currency)
            if value is None:
                continue
        parts.append(f"{field.label}: {value}")
    if len(parts) == 1:
        parts.extend(
            f"{column}: {value.strip()}"
            for column, value in row.items()
            if column and value and value.strip()
        )
    return " | ".join(parts)


class CsvIngestionService:
    """Ingests CSV exports as row-per-chunk documents."""

    def __init__(
        self,
        documents: DocumentService,
        tenants: TenantSettings,
        max_bytes: int = 10 * 1024 * 1024,
        currency_label: str = "PHP",
    ) -> None:
        self.documents = documents
        self.tenants = tenants
        self.max_bytes = max_bytes
        self.currency_label = currency_label

    async def ingest_csv(
        self,
        tenant_id: str,
        filename: str,
        data: bytes,
        category: str | None = None,
    ) -> CsvIngestResult:
        """
        Parse, render and store a CSV upload.

        A previous upload with the same filename for the tenant is removed
        once the new one is stored.

        Args:
            tenant_id: Owning tenant
            filename: Upload filename (becomes the document title)
            data: Raw file bytes
            category: products, sales or inventory; detected from headers if None

        Returns:
            CsvIngestResult: New document id, category and row count

        Raises:
            ValidationError: Unknown tenant, oversize/empty/undecodable file,
                unknown or undetectable category
            EmbeddingProviderError, StoreError: As for document ingest
        """
        validate_tenant(self.tenants, tenant_id)
        filename = (filename or "").strip()
        if not filename:
            raise ValidationError("Filename must not be empty", field="filename")
        if len(data) > self.max_bytes:
            raise ValidationError(
                f"File too large. Maximum size is {self.max_bytes // (1024 * 1024)}MB",
                field="file",
                details={"size": len(data)},
            )
        if not data.strip():
            raise ValidationError("CSV file is empty", field="file")
        try:
            text = data.decode("utf-8-sig")
        except UnicodeDecodeError as e:
            raise ValidationError("CSV file is not valid UTF-8", field="file") from e

        headers, rows = self._parse(text)
        resolved_category = self._category(category, set(headers))
        fields = resolve_fields(headers, resolved_category)
        display = self.tenants.display_name(tenant_id)
        logger.info(
            f"{__name__}:ingest_csv - Parsed CSV",
            extra={
                "tenant_id": tenant_id,
                "file_name": filename,
                "category": resolved_category.value,
                "rows": len(rows),
                "fields": [f.column for f in fields],
            },
        )

        passages = [
            (
                row_to_text(row, fields, display, self.currency_label),
                ChunkMetadata(
                    type=DocumentType.OTHER.value,
                    title=filename,
                    tags=[resolved_category.value],
                    attributes={
                        "category": resolved_category.value,
                        "filename": filename,
                        "row_index": index,
                    },
                ),
            )
            for index, row in enumerate(rows)
        ]

        previous = await self.documents.store.find_documents_by_title(
            tenant_id, filename, DocumentSource.CSV
        )
        result = await self.documents.store_passages(
            tenant_id=tenant_id,
            title=filename,
            document_type=DocumentType.OTHER,
            content=text,
            tags=[resolved_category.value],
            source=DocumentSource.CSV,
            passages=passages,
        )
        for document_id in previous:
            await self.documents.delete_document(tenant_id, document_id)

        return CsvIngestResult(
            document_id=result.document_id,
            filename=filename,
            category=resolved_category,
            rows_ingested=result.chunk_count,
            replaced_documents=len(previous),
        )

    def _parse(self, text: str) -> tuple[list[str], list[dict[str, str]]]:
        reader = csv.reader(io.StringIO(text))
        try:
            raw_headers = next(reader)
        except StopIteration as e:
            raise ValidationError("CSV file is empty", field="file") from e
        except csv.Error as e:
            raise ValidationError(f"Malformed CSV: {e}", field="file") from e
        headers = [normalize_header(h) for h in raw_headers]

        rows = []
        try:
            for values in reader:
                if not any(v.strip() for v in values):
                    continue
                rows.append(dict(zip(headers, values)))
        except csv.Error as e:
            raise ValidationError(f"Malformed CSV: {e}", field="file") from e
        if not rows:
            raise ValidationError("CSV file is empty or has no data rows", field="file")
        return headers, rows

    def _category(self, requested: str | None, headers: set[str]) -> CsvCategory:
        if requested:
            try:
                return CsvCategory(requested.strip().lower())
            except ValueError as e:
                raise ValidationError(
                    f"Invalid CSV category: {requested!r}",
                    field="category",
                    details={"allowed": [c.value for c in CsvCategory]},
                ) from e
        detected = detect_category(headers)
        if detected is None:
            raise ValidationError(
                "Could not detect CSV category from headers",
                field="category",
                details={"headers": sorted(headers)},
            )
        return detected
