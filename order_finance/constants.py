"""Business constants shared by the calculation modules."""

# Customer-facing tax charged on material and foam.
CUSTOMER_TAX_RATE = 0.13

# Internal material tax when a material company has no configured rate.
DEFAULT_MATERIAL_TAX_RATE = 0.13

# Corporate invoices may carry a card surcharge on subtotal + delivery + tax.
CREDIT_CARD_FEE_RATE = 0.025

# Allocation percentages must sum to 100 within this tolerance.
ALLOCATION_TOLERANCE = 0.01

# Pickup & delivery service types and how many trips each one bills
SERVICE_PICKUP = 'pickup'
SERVICE_DELIVERY = 'delivery'
SERVICE_BOTH = 'both'

SERVICE_TRIP_MULTIPLIERS = {
    SERVICE_PICKUP: 1,
    SERVICE_DELIVERY: 1,
    SERVICE_BOTH: 2,
}

CORPORATE_ORDER_TYPE = 'corporate'

# Payment history notes written by the remediation helpers
AUTO_PAID_NOTE = 'Auto-paid to complete order'
REFUND_NOTE = 'Refunded to cancel order'
