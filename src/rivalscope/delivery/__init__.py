"""Report delivery backends."""

from .resend import ReportDelivery, ResendDelivery

__all__ = ["ReportDelivery", "ResendDelivery"]
