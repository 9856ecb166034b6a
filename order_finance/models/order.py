"""Order document models.

Regular orders keep their line items under ``furnitureData.groups`` and their
payment fields under ``paymentData``. Corporate orders use top-level
``furnitureGroups`` and ``paymentDetails``. ``Order`` reads both layouts and
writes each order back in the layout it was read from.
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional

from ..constants import CORPORATE_ORDER_TYPE
from .base import DocumentModel


@dataclass
class FurnitureGroup(DocumentModel):
    """One piece of furniture within an order."""

    furniture_type: Any = None
    material_company: Any = None
    material_code: Any = None
    material_price: Any = None
    material_qnty: Any = None
    labour_price: Any = None
    labour_qnty: Any = None
    labour_note: Any = None
    foam_enabled: Any = None
    foam_price: Any = None
    foam_qnty: Any = None
    foam_note: Any = None
    painting_enabled: Any = None
    painting_labour: Any = None
    painting_qnty: Any = None
    painting_note: Any = None
    material_jl_price: Any = None
    material_jl_qnty: Any = None
    foam_jl_price: Any = None
    other_expenses: Any = None
    shipping: Any = None
    customer_note: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    field_mappings = {
        'furniture_type': 'furnitureType',
        'material_company': 'materialCompany',
        'material_code': 'materialCode',
        'material_price': 'materialPrice',
        'material_qnty': 'materialQnty',
        'labour_price': 'labourPrice',
        'labour_qnty': 'labourQnty',
        'labour_note': 'labourNote',
        'foam_enabled': 'foamEnabled',
        'foam_price': 'foamPrice',
        'foam_qnty': 'foamQnty',
        'foam_note': 'foamNote',
        'painting_enabled': 'paintingEnabled',
        'painting_labour': 'paintingLabour',
        'painting_qnty': 'paintingQnty',
        'painting_note': 'paintingNote',
        'material_jl_price': 'materialJLPrice',
        'material_jl_qnty': 'materialJLQnty',
        'foam_jl_price': 'foamJLPrice',
        'other_expenses': 'otherExpenses',
        'shipping': 'shipping',
        'customer_note': 'customerNote',
    }


@dataclass
class PaymentRecord(DocumentModel):
    """An entry in an order's payment history."""

    amount: Any = None
    date: Any = None
    notes: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    field_mappings = {
        'amount': 'amount',
        'date': 'date',
        'notes': 'notes',
    }


@dataclass
class PaymentData(DocumentModel):
    """Deposit, payments received and pickup & delivery settings."""

    deposit: Any = None
    amount_paid: Any = None
    payment_history: List[PaymentRecord] = field(default_factory=list)
    pickup_delivery_enabled: Any = None
    pickup_delivery_cost: Any = None
    pickup_delivery_service_type: Any = None
    notes: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    field_mappings = {
        'deposit': 'deposit',
        'amount_paid': 'amountPaid',
        'payment_history': 'paymentHistory',
        'pickup_delivery_enabled': 'pickupDeliveryEnabled',
        'pickup_delivery_cost': 'pickupDeliveryCost',
        'pickup_delivery_service_type': 'pickupDeliveryServiceType',
        'notes': 'notes',
    }

    @classmethod
    def from_document(cls, document: Dict[str, Any]) -> 'PaymentData':
        payment = super().from_document(document)
        history = payment.payment_history or []
        payment.payment_history = [
            entry if isinstance(entry, PaymentRecord) else PaymentRecord.from_document(entry)
            for entry in history
            if isinstance(entry, (dict, PaymentRecord))
        ]
        return payment

    def to_document(self) -> Dict[str, Any]:
        document = super().to_document()
        document['paymentHistory'] = [entry.to_document() for entry in self.payment_history]
        return document


@dataclass
class OrderDetails(DocumentModel):
    """Invoice number, job dates and sales platform."""

    bill_invoice: Any = None
    start_date: Any = None
    end_date: Any = None
    platform: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    field_mappings = {
        'bill_invoice': 'billInvoice',
        'start_date': 'startDate',
        'end_date': 'endDate',
        'platform': 'platform',
    }


@dataclass
class ExtraExpense(DocumentModel):
    """An ad-hoc expense recorded against an order."""

    description: Any = None
    price: Any = None
    unit: Any = None
    tax: Any = None
    tax_type: Any = 'fixed'
    total: Any = None
    extra: Dict[str, Any] = field(default_factory=dict)

    field_mappings = {
        'description': 'description',
        'price': 'price',
        'unit': 'unit',
        'tax': 'tax',
        'tax_type': 'taxType',
        'total': 'total',
    }


@dataclass
class Order:
    """An upholstery order as stored in the document store."""

    id: Optional[str] = None
    furniture_groups: List[FurnitureGroup] = field(default_factory=list)
    payment: PaymentData = field(default_factory=PaymentData)
    order_details: OrderDetails = field(default_factory=OrderDetails)
    invoice_status: Optional[str] = None
    extra_expenses: List[ExtraExpense] = field(default_factory=list)
    allocation: Optional[Dict[str, Any]] = None
    order_type: Optional[str] = None
    credit_card_fee_enabled: Any = None
    corporate_layout: bool = False
    furniture_data_extra: Dict[str, Any] = field(default_factory=dict)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_corporate(self) -> bool:
        """True for corporate orders, by explicit type or by document layout."""
        return self.order_type == CORPORATE_ORDER_TYPE or self.corporate_layout

    @classmethod
    def from_document(cls, document: Dict[str, Any], order_id: Optional[str] = None) -> 'Order':
        """Read an order document in either the regular or corporate layout.

        Args:
            document: Order document mapping
            order_id: Id to use when the document does not carry one

        Returns:
            Order: Parsed order
        """
        document = dict(document or {})
        corporate_layout = 'furnitureGroups' in document and 'paymentDetails' in document

        furniture_data_extra = {}
        if corporate_layout:
            raw_groups = document.pop('furnitureGroups', None) or []
            raw_payment = document.pop('paymentDetails', None) or {}
        else:
            furniture_data = dict(document.pop('furnitureData', None) or {})
            raw_groups = furniture_data.pop('groups', None) or []
            furniture_data_extra = furniture_data
            raw_payment = document.pop('paymentData', None) or {}

        return cls(
            id=document.pop('id', None) or order_id,
            furniture_groups=[
                FurnitureGroup.from_document(group)
                for group in raw_groups
                if isinstance(group, dict)
            ],
            payment=PaymentData.from_document(raw_payment),
            order_details=OrderDetails.from_document(document.pop('orderDetails', None) or {}),
            invoice_status=document.pop('invoiceStatus', None),
            extra_expenses=[
                ExtraExpense.from_document(expense)
                for expense in (document.pop('extraExpenses', None) or [])
                if isinstance(expense, dict)
            ],
            allocation=document.pop('allocation', None),
            order_type=document.pop('orderType', None),
            credit_card_fee_enabled=document.pop('creditCardFeeEnabled', None),
            corporate_layout=corporate_layout,
            furniture_data_extra=furniture_data_extra,
            extra=document,
        )

    def to_document(self) -> Dict[str, Any]:
        """Serialize the order in the layout it was read from."""
        document = dict(self.extra)
        if self.id is not None:
            document['id'] = self.id

        groups = [group.to_document() for group in self.furniture_groups]
        if self.corporate_layout:
            document['furnitureGroups'] = groups
            document['paymentDetails'] = self.payment.to_document()
        else:
            document['furnitureData'] = {**self.furniture_data_extra, 'groups': groups}
            document['paymentData'] = self.payment.to_document()

        document['orderDetails'] = self.order_details.to_document()
        document['extraExpenses'] = [expense.to_document() for expense in self.extra_expenses]
        if self.invoice_status is not None:
            document['invoiceStatus'] = self.invoice_status
        if self.allocation is not None:
            document['allocation'] = self.allocation
        if self.order_type is not None:
            document['orderType'] = self.order_type
        if self.credit_card_fee_enabled is not None:
            document['creditCardFeeEnabled'] = self.credit_card_fee_enabled
        return document

    def with_updates(self, **changes) -> 'Order':
        """Return a copy of the order with the given fields replaced."""
        return replace(self, **changes)
