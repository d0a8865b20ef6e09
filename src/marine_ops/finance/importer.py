"""
Bulk expense import from spreadsheets.

Accepts CSV or Excel uploads exported from bank statements and ledgers.
The header row is located automatically (exports often start with a few
lines of title or account details), columns are mapped onto expense
fields by name, and rows with a date and a positive amount are inserted
in batches.
"""

import csv
import io
import re
import logging
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

import pandas as pd
from sqlalchemy.ext.asyncio import AsyncSession

from marine_ops.models.finance import Expense
from marine_ops.exceptions import DomainValidationError

logger = logging.getLogger(__name__)

HEADER_SCAN_ROWS = 20
BATCH_SIZE = 50
DEFAULT_STATUS = "paid"
DEFAULT_PAYMENT_METHOD = "transfer"
SKIP = "skip"

# Checked in order; the first pattern matching a header wins
COLUMN_PATTERNS = (
    (re.compile(r"date"), "date"),
    (re.compile(r"amount|total|sum|price|cost"), "amount"),
    (re.compile(r"type|expense.?type"), "expense_type"),
    (re.compile(r"categ"), "category"),
    (re.compile(r"desc"), "description"),
    (re.compile(r"vendor|supplier|payee"), "vendor_name"),
    (re.compile(r"payment|method"), "payment_method"),
    (re.compile(r"status"), "status"),
)
TARGET_FIELDS = tuple(target for _, target in COLUMN_PATTERNS)
NON_NUMERIC = re.compile(r"[^0-9.\-]")


@dataclass
class ImportResult:
    success: int = 0
    failed: int = 0
    skipped: int = 0
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict:
        return {
            "success": self.success,
            "failed": self.failed,
            "skipped": self.skipped,
            "errors": self.errors,
        }


def _is_number(value: str) -> bool:
    try:
        float(value)
    except ValueError:
        return False
    return True


def read_sheet(content: bytes, filename: str) -> pd.DataFrame:
    """Load the first sheet of an upload as strings, without assuming a header."""
    name = filename.lower()
    buffer = io.BytesIO(content)
    try:
        if name.endswith(".csv"):
            # Title lines above the header are often narrower than the data
            text = content.decode("utf-8-sig", errors="replace")
            width = max((len(row) for row in csv.reader(io.StringIO(text))), default=1)
            frame = pd.read_csv(buffer, header=None, names=list(range(width)), dtype=str,
                                keep_default_na=False, encoding="utf-8-sig")
        elif name.endswith((".xlsx", ".xlsm")):
            frame = pd.read_excel(buffer, header=None, dtype=str, engine="openpyxl")
        else:
            raise DomainValidationError(f"Unsupported file type: {filename}")
    except (ValueError, pd.errors.ParserError) as e:
        raise DomainValidationError(f"Could not read {filename}: {e}")

    return frame.fillna("")


def detect_header_row(frame: pd.DataFrame) -> int:
    """Index of the row, among the first few, holding the most text cells."""
    best_row, best_count = 0, 0
    for index in range(min(HEADER_SCAN_ROWS, len(frame))):
        cells = (str(value).strip() for value in frame.iloc[index])
        text_count = sum(1 for cell in cells if cell and not _is_number(cell))
        if text_count > best_count:
            best_row, best_count = index, text_count
    return best_row


def guess_column_mapping(columns: List[str]) -> Dict[str, str]:
    """Map spreadsheet columns onto expense fields from their header text."""
    mapping = {}
    taken = set()
    for column in columns:
        lower = column.lower()
        target = next(
            (target for pattern, target in COLUMN_PATTERNS if pattern.search(lower)),
            SKIP,
        )
        if target in taken:
            target = SKIP
        if target != SKIP:
            taken.add(target)
        mapping[column] = target
    return mapping


def clean_amount(value: str) -> float:
    """Strip currency symbols and separators; unparseable amounts become 0."""
    cleaned = NON_NUMERIC.sub("", str(value))
    try:
        return float(cleaned)
    except ValueError:
        return 0.0


def parse_date(value: str) -> Optional[date]:
    value = str(value).strip()
    if not value:
        return None
    parsed = pd.to_datetime(value, errors="coerce")
    if pd.isna(parsed):
        return None
    return parsed.date()


class ExpenseImporter:
    """Turns an uploaded spreadsheet into expense rows."""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session

    def load(self, content: bytes, filename: str) -> pd.DataFrame:
        """Read an upload and promote its detected header row to column names."""
        raw = read_sheet(content, filename)
        if raw.empty:
            raise DomainValidationError("No data found in the uploaded file")

        header_row = detect_header_row(raw)
        headers = []
        for position, value in enumerate(raw.iloc[header_row]):
            header = str(value).strip() or f"Unnamed: {position}"
            headers.append(header if header not in headers else f"{header}.{position}")

        frame = raw.iloc[header_row + 1:].copy()
        frame.columns = headers
        non_blank = (frame.astype(str).map(str.strip) != "").any(axis=1)
        frame = frame[non_blank]
        logger.debug(f"Header detected on row {header_row} of {filename}: {headers}")
        return frame.reset_index(drop=True)

    def preview(self, content: bytes, filename: str) -> Dict:
        frame = self.load(content, filename)
        return {
            "columns": list(frame.columns),
            "mapping": guess_column_mapping(list(frame.columns)),
            "row_count": len(frame),
            "sample": frame.head(5).to_dict(orient="records"),
        }

    def transform(self, frame: pd.DataFrame, mapping: Dict[str, str],
                  default_status: str = DEFAULT_STATUS,
                  default_payment_method: str = DEFAULT_PAYMENT_METHOD,
                  company_id: Optional[int] = None) -> List[Dict]:
        """Apply a column mapping and defaults to every row."""
        source = {}
        for column, target in mapping.items():
            if target != SKIP and target in TARGET_FIELDS and column in frame.columns:
                source.setdefault(target, column)

        if "date" not in source or "amount" not in source:
            raise DomainValidationError("Both a date column and an amount column must be mapped")

        rows = []
        for record in frame.to_dict(orient="records"):
            def value(target: str) -> str:
                column = source.get(target)
                return str(record.get(column, "")).strip() if column else ""

            rows.append({
                "date": parse_date(value("date")),
                "amount": clean_amount(value("amount")),
                "expense_type": value("expense_type") or "general",
                "category": value("category") or None,
                "description": value("description") or None,
                "vendor_name": value("vendor_name") or None,
                "payment_method": value("payment_method") or default_payment_method,
                "status": value("status") or default_status,
                "company_id": company_id,
            })
        return rows

    async def import_expenses(self, content: bytes, filename: str,
                              mapping: Optional[Dict[str, str]] = None,
                              default_status: str = DEFAULT_STATUS,
                              default_payment_method: str = DEFAULT_PAYMENT_METHOD,
                              company_id: Optional[int] = None) -> ImportResult:
        """
        Import expenses from an upload.

        Args:
            content: Raw file bytes
            filename: Original file name, used to pick the reader
            mapping: Column overrides merged over the guessed mapping
            default_status: Status for rows without a status column value
            default_payment_method: Payment method for rows without one
            company_id: Company the imported expenses belong to

        Returns:
            ImportResult: Inserted, failed and skipped row counts
        """
        frame = self.load(content, filename)
        column_mapping = guess_column_mapping(list(frame.columns))
        if mapping:
            for column, target in mapping.items():
                if target != SKIP:
                    for other, other_target in column_mapping.items():
                        if other != column and other_target == target:
                            column_mapping[other] = SKIP
                column_mapping[column] = target

        rows = self.transform(frame, column_mapping, default_status, default_payment_method, company_id)
        valid = [row for row in rows if row["date"] and row["amount"] > 0]

        result = ImportResult(skipped=len(rows) - len(valid))
        for start in range(0, len(valid), BATCH_SIZE):
            batch = valid[start:start + BATCH_SIZE]
            try:
                self.db.add_all([
                    Expense(paid_date=row["date"] if row["status"] == "paid" else None, **row)
                    for row in batch
                ])
                await self.db.commit()
                result.success += len(batch)
            except Exception as e:
                await self.db.rollback()
                logger.error(f"Expense import batch {start // BATCH_SIZE + 1} failed: {e}")
                result.errors.append(f"Batch {start // BATCH_SIZE + 1}: {e}")
                result.failed += len(batch)

        logger.info(
            f"Imported expenses from {filename}: {result.success} inserted, "
            f"{result.failed} failed, {result.skipped} skipped"
        )
        return result
