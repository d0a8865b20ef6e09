"""
Quotations and their conversion into invoices.

Lifecycle::

    draft --> sent --approve--> approved --convert--> converted
                   --reject---> rejected

Converting writes a draft invoice with the quotation's line items. No
income is booked until that invoice is paid.
"""

from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from marine_ops.models.finance import Invoice, InvoiceItem, Quotation, QuotationItem, QUOTATION_STATUSES
from marine_ops.finance.invoices import InvoiceManager, build_items, compute_totals, DEFAULT_TAX_RATE
from marine_ops.repository import Repository
from marine_ops.tenancy import company_scope
from marine_ops.exceptions import ConflictError, DomainValidationError
import logging

logger = logging.getLogger(__name__)

EDITABLE_STATUSES = ("draft", "sent")
DELETABLE_STATUSES = ("draft", "rejected", "expired")

# Fields copied onto the invoice a quotation turns into
CARRIED_FIELDS = (
    "company_id", "client_name", "client_address", "client_phone", "client_email",
    "apply_tax", "tax_rate", "notes",
)
ITEM_FIELDS = (
    "item_type", "description", "quantity", "unit", "unit_price", "total_price",
    "land_equipment_id", "land_id",
)


class QuotationManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.quotations = Repository(db_session, Quotation)

    async def get_quotation(self, quotation_id: int) -> Quotation:
        return await self.quotations.get(quotation_id)

    async def list_quotations(self, status: Optional[str] = None,
                              company_id: Optional[int] = None) -> Dict:
        criteria = []
        if status:
            criteria.append(Quotation.status == status)
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(Quotation.company_id.in_(scope))
        quotations = await self.quotations.list(*criteria, order_by=Quotation.date.desc())

        return {
            "quotations": quotations,
            "approved_count": sum(1 for q in quotations if q.status == "approved"),
            "pending_count": sum(1 for q in quotations if q.status == "sent"),
            "converted_value": round(sum(q.total for q in quotations if q.status == "converted"), 2),
        }

    async def next_quotation_number(self, year: Optional[int] = None) -> str:
        """Next free ``QUO-<year>-NNN`` number."""
        year = year or date.today().year
        prefix = f"QUO-{year}-"
        result = await self.db.execute(
            select(Quotation.quotation_number).where(Quotation.quotation_number.like(f"{prefix}%"))
        )

        highest = 0
        for number in result.scalars().all():
            suffix = number[len(prefix):]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return f"{prefix}{highest + 1:03d}"

    async def create_quotation(self, items: List[Dict], **values) -> Quotation:
        if not items:
            raise DomainValidationError("A quotation needs at least one item")
        self._check_status(values.get("status"))
        if not values.get("quotation_number"):
            values["quotation_number"] = await self.next_quotation_number(values["date"].year)
        elif await self.db.scalar(
            select(Quotation.id).where(Quotation.quotation_number == values["quotation_number"])
        ):
            raise ConflictError(f"Quotation number {values['quotation_number']} is already in use")

        values.setdefault("tax_rate", DEFAULT_TAX_RATE)
        built = build_items(items)
        totals = compute_totals(built, values.get("apply_tax", False), values["tax_rate"])

        quotation = Quotation(**values, **totals)
        quotation.items = [QuotationItem(**item) for item in built]
        self.db.add(quotation)
        await self.db.commit()

        logger.info(f"Created quotation {quotation.quotation_number} for {quotation.total}")
        return quotation

    async def update_quotation(self, quotation_id: int, changes: Dict,
                               items: Optional[List[Dict]] = None) -> Quotation:
        """Edit a draft or sent quotation; passing ``items`` replaces all line items."""
        quotation = await self.quotations.get(quotation_id)
        if quotation.status not in EDITABLE_STATUSES:
            raise ConflictError(f"Quotation {quotation.quotation_number} is {quotation.status} and can no longer be edited")
        self._check_status(changes.get("status"))
        if changes.get("status") in ("approved", "rejected"):
            raise DomainValidationError("Use the approve and reject actions to decide on a quotation")
        if items is not None and not items:
            raise DomainValidationError("A quotation needs at least one item")

        for field, value in changes.items():
            setattr(quotation, field, value)

        if items is not None:
            built = build_items(items)
            quotation.items = [QuotationItem(**item) for item in built]
        else:
            built = [{"total_price": item.total_price} for item in quotation.items]

        totals = compute_totals(built, quotation.apply_tax, quotation.tax_rate)
        for field, value in totals.items():
            setattr(quotation, field, value)

        await self.db.commit()
        return quotation

    async def approve(self, quotation_id: int) -> Quotation:
        return await self._decide(quotation_id, "approved")

    async def reject(self, quotation_id: int) -> Quotation:
        return await self._decide(quotation_id, "rejected")

    async def convert_to_invoice(self, quotation_id: int, invoice_date: Optional[date] = None) -> Invoice:
        """Turn an approved quotation into a draft invoice with the same items and totals."""
        quotation = await self.quotations.get(quotation_id)
        if quotation.status != "approved":
            raise ConflictError(f"Quotation {quotation.quotation_number} is {quotation.status}; only approved quotations can be converted")

        invoice_date = invoice_date or date.today()
        invoice = Invoice(
            invoice_number=await InvoiceManager(self.db).next_invoice_number(invoice_date.year),
            invoice_type="income",
            date=invoice_date,
            status="draft",
            subtotal=quotation.subtotal,
            tax=quotation.tax,
            total=quotation.total,
            **{field: getattr(quotation, field) for field in CARRIED_FIELDS},
        )
        invoice.items = [
            InvoiceItem(**{field: getattr(item, field) for field in ITEM_FIELDS})
            for item in quotation.items
        ]
        self.db.add(invoice)
        await self.db.flush()

        quotation.status = "converted"
        quotation.converted_to_invoice_id = invoice.id
        await self.db.commit()

        logger.info(f"Quotation {quotation.quotation_number} converted into invoice {invoice.invoice_number}")
        return invoice

    async def delete_quotation(self, quotation_id: int) -> None:
        quotation = await self.quotations.get(quotation_id)
        if quotation.status not in DELETABLE_STATUSES:
            raise ConflictError(f"Quotation {quotation.quotation_number} is {quotation.status} and cannot be deleted")
        await self.db.delete(quotation)
        await self.db.commit()
        logger.info(f"Deleted quotation {quotation.quotation_number}")

    async def _decide(self, quotation_id: int, outcome: str) -> Quotation:
        quotation = await self.quotations.get(quotation_id)
        if quotation.status != "sent":
            raise ConflictError(f"Quotation {quotation.quotation_number} is {quotation.status}; only sent quotations can be {outcome}")
        quotation.status = outcome
        await self.db.commit()
        logger.info(f"Quotation {quotation.quotation_number} {outcome}")
        return quotation

    @staticmethod
    def _check_status(status: Optional[str]):
        if status is None:
            return
        if status not in QUOTATION_STATUSES:
            raise DomainValidationError(f"Unknown quotation status: {status}")
        if status == "converted":
            raise DomainValidationError("Quotations are converted through the convert action")
