"""Client booking checkout."""

from pickandgo.bookings.checkout import BookingQuote, Checkout, CustomerInfo, Invoice

__all__ = ["BookingQuote", "Checkout", "CustomerInfo", "Invoice"]
