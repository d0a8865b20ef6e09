"""
Invoicing and the stock and ledger side effects of invoice payments.

Lifecycle of an income invoice::

    draft / sent / overdue --record_deposit--> deposit_paid
    draft / sent / overdue / deposit_paid --mark_paid--> paid
    deposit_paid --refund_deposit--> cancelled_refunded
    deposit_paid --keep_deposit--> cancelled_deposit_kept
    paid --refund_sale--> refunded

Money movements are written to ``income_records`` and ``expenses`` with
``reference_id`` pointing back at the invoice so they can be reversed.
"""

from datetime import date
from typing import Dict, List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete, update
from marine_ops.models.finance import (
    Invoice, InvoiceItem, IncomeRecord, Expense, Quotation, ITEM_TYPES, INVOICE_STATUSES,
)
from marine_ops.models.scrap import LandEquipment, LandPurchase
from marine_ops.finance.banking import check_bank_account
from marine_ops.repository import Repository
from marine_ops.tenancy import company_scope
from marine_ops.exceptions import ConflictError, DomainValidationError
import logging

logger = logging.getLogger(__name__)

DEFAULT_TAX_RATE = 5.0
EDITABLE_STATUSES = ("draft", "sent", "overdue")
PAYABLE_STATUSES = ("draft", "sent", "overdue", "deposit_paid")
CLOSED_STATUSES = ("paid", "cancelled", "cancelled_refunded", "cancelled_deposit_kept", "refunded")

# Income and expense rows written on behalf of invoices
INVOICE_INCOME_TYPES = ("invoice", "deposit", "deposit_kept")
REFUND_EXPENSE_TYPE = "refund"


def invoice_label(invoice: Invoice) -> str:
    label = f"Invoice {invoice.invoice_number}"
    if invoice.client_name:
        label += f" ({invoice.client_name})"
    return label


def compute_totals(items: List[Dict], apply_tax: bool, tax_rate: float) -> Dict[str, float]:
    """Subtotal, tax and total for a set of line items."""
    subtotal = round(sum(item["total_price"] for item in items), 2)
    tax = round(subtotal * tax_rate / 100, 2) if apply_tax else 0.0
    return {"subtotal": subtotal, "tax": tax, "total": round(subtotal + tax, 2)}


def build_items(items: List[Dict]) -> List[Dict]:
    """Validate line items and fill in their totals."""
    built = []
    for item in items:
        item = dict(item)
        item_type = item.get("item_type") or "other"
        if item_type not in ITEM_TYPES:
            raise DomainValidationError(f"Unknown invoice item type: {item_type}")
        if item_type == "equipment_sale" and not item.get("land_equipment_id"):
            raise DomainValidationError("Equipment sale items must reference the equipment sold")
        if item_type == "scrap_sale" and not item.get("land_id"):
            raise DomainValidationError("Scrap sale items must reference the land sold from")

        quantity = item.get("quantity") or 0.0
        unit_price = item.get("unit_price") or 0.0
        item.update(
            item_type=item_type,
            quantity=quantity,
            unit_price=unit_price,
            total_price=round(quantity * unit_price, 2),
        )
        built.append(item)
    return built


class InvoiceManager:
    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.invoices = Repository(db_session, Invoice)

    async def get_invoice(self, invoice_id: int) -> Invoice:
        return await self.invoices.get(invoice_id)

    async def list_invoices(self, status: Optional[str] = None, invoice_type: Optional[str] = None,
                            company_id: Optional[int] = None) -> Dict:
        """Invoices with invoiced, collected and pending figures."""
        criteria = []
        if status:
            criteria.append(Invoice.status == status)
        if invoice_type:
            criteria.append(Invoice.invoice_type == invoice_type)
        scope = await company_scope(self.db, company_id)
        if scope is not None:
            criteria.append(Invoice.company_id.in_(scope))
        invoices = await self.invoices.list(*criteria, order_by=Invoice.date.desc())

        income_invoices = [inv for inv in invoices if inv.invoice_type == "income"]
        total_invoiced = sum(
            inv.total for inv in income_invoices
            if inv.status not in ("cancelled_refunded", "refunded", "cancelled")
        )
        total_collected = 0.0
        for inv in income_invoices:
            if inv.status == "paid":
                total_collected += inv.total
            elif inv.status in ("deposit_paid", "cancelled_deposit_kept"):
                total_collected += inv.deposit_amount or 0.0

        return {
            "invoices": invoices,
            "total_invoiced": round(total_invoiced, 2),
            "total_collected": round(total_collected, 2),
            "unpaid_count": sum(
                1 for inv in invoices if inv.status in ("sent", "overdue", "deposit_paid")
            ),
        }

    async def next_invoice_number(self, year: Optional[int] = None) -> str:
        """Next free ``INV-<year>-NNN`` number."""
        year = year or date.today().year
        prefix = f"INV-{year}-"
        result = await self.db.execute(
            select(Invoice.invoice_number).where(Invoice.invoice_number.like(f"{prefix}%"))
        )

        highest = 0
        for number in result.scalars().all():
            suffix = number[len(prefix):]
            if suffix.isdigit():
                highest = max(highest, int(suffix))
        return f"{prefix}{highest + 1:03d}"

    async def create_invoice(self, items: List[Dict], **values) -> Invoice:
        """Create an invoice and its line items, numbering it when no number is given."""
        if values.get("status") and values["status"] not in INVOICE_STATUSES:
            raise DomainValidationError(f"Unknown invoice status: {values['status']}")
        if not values.get("invoice_number"):
            values["invoice_number"] = await self.next_invoice_number(values["date"].year)
        elif await self.db.scalar(
            select(Invoice.id).where(Invoice.invoice_number == values["invoice_number"])
        ):
            raise ConflictError(f"Invoice number {values['invoice_number']} is already in use")

        await check_bank_account(self.db, values.get("payment_bank_account_id"))
        values.setdefault("tax_rate", DEFAULT_TAX_RATE)
        built = build_items(items)
        totals = compute_totals(built, values.get("apply_tax", False), values["tax_rate"])

        invoice = Invoice(**values, **totals)
        invoice.items = [InvoiceItem(**item) for item in built]
        self.db.add(invoice)
        await self.db.commit()

        logger.info(f"Created invoice {invoice.invoice_number} for {invoice.total}")
        return invoice

    async def update_invoice(self, invoice_id: int, changes: Dict,
                             items: Optional[List[Dict]] = None) -> Invoice:
        """Edit an unpaid invoice; passing ``items`` replaces all line items."""
        invoice = await self.invoices.get(invoice_id)
        if invoice.status not in EDITABLE_STATUSES:
            raise ConflictError(f"Invoice {invoice.invoice_number} is {invoice.status} and can no longer be edited")
        if changes.get("status") and changes["status"] not in EDITABLE_STATUSES:
            raise DomainValidationError(f"Use the payment actions to move an invoice to {changes['status']}")
        await check_bank_account(self.db, changes.get("payment_bank_account_id"))

        for field, value in changes.items():
            setattr(invoice, field, value)

        if items is not None:
            built = build_items(items)
            invoice.items = [InvoiceItem(**item) for item in built]
        else:
            built = [{"total_price": item.total_price} for item in invoice.items]

        totals = compute_totals(built, invoice.apply_tax, invoice.tax_rate)
        for field, value in totals.items():
            setattr(invoice, field, value)

        await self.db.commit()
        return invoice

    # Payment

    async def mark_paid(self, invoice_id: int, payment_date: Optional[date] = None,
                        payment_method: Optional[str] = None,
                        bank_account_id: Optional[int] = None) -> Invoice:
        """
        Settle an invoice in full.

        Books the outstanding balance as income on the receiving bank account
        and takes sold equipment and
        scrap tonnage out of stock.
        """
        invoice = await self.invoices.get(invoice_id)
        if invoice.status == "paid":
            raise ConflictError(f"Invoice {invoice.invoice_number} is already paid")
        if invoice.status not in PAYABLE_STATUSES:
            raise ConflictError(f"Invoice {invoice.invoice_number} is {invoice.status} and cannot be paid")

        payment_date = payment_date or date.today()
        invoice.status = "paid"
        invoice.payment_date = payment_date
        if payment_method:
            invoice.payment_method = payment_method
        if bank_account_id is not None:
            invoice.payment_bank_account_id = await check_bank_account(self.db, bank_account_id)

        amount = invoice.balance_due if invoice.deposit_date else invoice.total
        if amount > 0:
            self.db.add(IncomeRecord(
                company_id=invoice.company_id,
                income_date=payment_date,
                income_type="invoice",
                source_type="invoice",
                amount=amount,
                description=invoice_label(invoice),
                payment_method=invoice.payment_method,
                bank_account_id=invoice.payment_bank_account_id,
                reference_id=invoice.id,
            ))

        await self._apply_stock(invoice, direction=-1)
        await self.db.commit()

        logger.info(f"Invoice {invoice.invoice_number} paid: {amount} booked as income")
        return invoice

    async def record_deposit(self, invoice_id: int, amount: float, deposit_date: Optional[date] = None,
                             payment_method: Optional[str] = None,
                             bank_account_id: Optional[int] = None) -> Invoice:
        invoice = await self.invoices.get(invoice_id)
        if invoice.status not in EDITABLE_STATUSES:
            raise ConflictError(f"Invoice {invoice.invoice_number} is {invoice.status}; a deposit cannot be recorded")
        if amount <= 0 or amount > invoice.total:
            raise DomainValidationError("Deposit must be positive and no more than the invoice total")

        deposit_date = deposit_date or date.today()
        invoice.deposit_amount = amount
        invoice.deposit_date = deposit_date
        invoice.deposit_payment_method = payment_method
        invoice.deposit_bank_account_id = await check_bank_account(self.db, bank_account_id)
        invoice.status = "deposit_paid"

        self.db.add(IncomeRecord(
            company_id=invoice.company_id,
            income_date=deposit_date,
            income_type="deposit",
            source_type="invoice",
            amount=amount,
            description=f"Deposit received - {invoice_label(invoice)}",
            payment_method=payment_method,
            bank_account_id=invoice.deposit_bank_account_id,
            reference_id=invoice.id,
        ))
        await self.db.commit()

        logger.info(f"Deposit of {amount} recorded on invoice {invoice.invoice_number}")
        return invoice

    async def refund_deposit(self, invoice_id: int, refund_date: Optional[date] = None,
                             payment_method: Optional[str] = None, notes: Optional[str] = None,
                             bank_account_id: Optional[int] = None) -> Invoice:
        """Cancel the deal and pay the deposit back, by default from the account it came into."""
        invoice = await self._require_deposit(invoice_id)
        refund_date = refund_date or date.today()
        invoice.deposit_refund_bank_account_id = await check_bank_account(
            self.db, bank_account_id or invoice.deposit_bank_account_id
        )

        description = f"Deposit refunded - {invoice_label(invoice)}"
        if notes:
            description += f" - {notes}"
        self.db.add(self._refund_expense(invoice, invoice.deposit_amount, refund_date,
                                         payment_method or invoice.deposit_payment_method, description,
                                         invoice.deposit_refund_bank_account_id))
        invoice.status = "cancelled_refunded"
        await self.db.commit()

        logger.info(f"Deposit on invoice {invoice.invoice_number} refunded")
        return invoice

    async def keep_deposit(self, invoice_id: int) -> Invoice:
        """Cancel the deal and keep the deposit as income."""
        invoice = await self._require_deposit(invoice_id)

        result = await self.db.execute(
            select(IncomeRecord).where(
                IncomeRecord.reference_id == invoice.id,
                IncomeRecord.income_type == "deposit",
            )
        )
        deposit_rows = result.scalars().all()
        for row in deposit_rows:
            row.income_type = "deposit_kept"
            row.description = f"Deposit kept - {invoice_label(invoice)} - deal cancelled"
        if not deposit_rows:
            self.db.add(IncomeRecord(
                company_id=invoice.company_id,
                income_date=date.today(),
                income_type="deposit_kept",
                source_type="invoice",
                amount=invoice.deposit_amount,
                description=f"Deposit kept - {invoice_label(invoice)} - deal cancelled",
                payment_method=invoice.deposit_payment_method,
                bank_account_id=invoice.deposit_bank_account_id,
                reference_id=invoice.id,
            ))

        invoice.status = "cancelled_deposit_kept"
        await self.db.commit()

        logger.info(f"Deposit on invoice {invoice.invoice_number} kept as income")
        return invoice

    async def refund_sale(self, invoice_id: int, refund_date: Optional[date] = None,
                          notes: Optional[str] = None,
                          bank_account_id: Optional[int] = None) -> Invoice:
        """
        Reverse a paid sale: book the refund as an expense and restock.

        The income booked at payment stays, so cash in and the refund cash
        out cancel each other in the reports.
        The refund leaves the account the payment came into unless another
        one is given.
        """
        invoice = await self.invoices.get(invoice_id)
        if invoice.status != "paid":
            raise ConflictError(f"Invoice {invoice.invoice_number} is {invoice.status}; only paid sales can be refunded")
        account_id = await check_bank_account(self.db, bank_account_id or invoice.payment_bank_account_id)

        description = f"Sale refunded - {invoice_label(invoice)}"
        if notes:
            description += f" - {notes}"
        self.db.add(self._refund_expense(invoice, invoice.total, refund_date or date.today(),
                                         invoice.payment_method or "cash", description,
                                         account_id))
        await self._apply_stock(invoice, direction=1)
        invoice.status = "refunded"
        await self.db.commit()

        logger.info(f"Sale on invoice {invoice.invoice_number} refunded")
        return invoice

    async def delete_invoice(self, invoice_id: int) -> None:
        """
        Delete an invoice after reversing everything it booked.

        A quotation converted into this invoice goes back to ``approved``.
        """
        invoice = await self.invoices.get(invoice_id)

        if invoice.status == "paid":
            await self._apply_stock(invoice, direction=1)
        await self._delete_income(invoice)
        await self.db.execute(
            delete(Expense).where(
                Expense.reference_id == invoice.id,
                Expense.expense_type == REFUND_EXPENSE_TYPE,
            )
        )
        await self.db.execute(
            update(Quotation)
            .where(Quotation.converted_to_invoice_id == invoice.id)
            .values(status="approved", converted_to_invoice_id=None)
        )

        await self.db.delete(invoice)
        await self.db.commit()
        logger.info(f"Deleted invoice {invoice.invoice_number}")

    # Helpers

    async def _require_deposit(self, invoice_id: int) -> Invoice:
        invoice = await self.invoices.get(invoice_id)
        if invoice.status != "deposit_paid":
            raise ConflictError(f"Invoice {invoice.invoice_number} has no open deposit")
        return invoice

    async def _delete_income(self, invoice: Invoice):
        await self.db.execute(
            delete(IncomeRecord).where(
                IncomeRecord.reference_id == invoice.id,
                IncomeRecord.income_type.in_(INVOICE_INCOME_TYPES),
            )
        )

    def _refund_expense(self, invoice: Invoice, amount: float, refund_date: date,
                        payment_method: Optional[str], description: str,
                        bank_account_id: Optional[int] = None) -> Expense:
        return Expense(
            company_id=invoice.company_id,
            expense_type=REFUND_EXPENSE_TYPE,
            category="other",
            amount=amount,
            date=refund_date,
            description=description,
            payment_method=payment_method,
            status="paid",
            paid_date=refund_date,
            bank_account_id=bank_account_id,
            reference_id=invoice.id,
        )

    async def _apply_stock(self, invoice: Invoice, direction: int):
        """
        Move sold stock out of (``direction=-1``) or back into (``1``) inventory.

        Equipment quantities and land tonnage never go below zero.
        """
        for item in invoice.items:
            if item.item_type == "equipment_sale" and item.land_equipment_id:
                equipment = await self.db.get(LandEquipment, item.land_equipment_id)
                if equipment is None:
                    continue
                sold = int(item.quantity or 1)
                if direction < 0:
                    remaining = (equipment.quantity or 0) - sold
                    equipment.quantity = max(remaining, 0)
                    if remaining <= 0:
                        equipment.status = "sold"
                else:
                    equipment.quantity = (equipment.quantity or 0) + sold
                    equipment.status = "available"

            elif item.item_type == "scrap_sale" and item.land_id:
                land = await self.db.get(LandPurchase, item.land_id)
                if land is None:
                    continue
                tons = item.quantity or 0.0
                if direction < 0:
                    land.remaining_tonnage = max((land.remaining_tonnage or 0.0) - tons, 0.0)
                    land.scrap_tonnage_sold = (land.scrap_tonnage_sold or 0.0) + tons
                else:
                    land.remaining_tonnage = (land.remaining_tonnage or 0.0) + tons
                    land.scrap_tonnage_sold = max((land.scrap_tonnage_sold or 0.0) - tons, 0.0)
