from enum import Enum


class PaymentStatus(str, Enum):
    pending = "pending"
    in_progress = "in_progress"
    paid = "paid"
    expired = "expired"
    cancelled = "cancelled"


# Transitions a customer (or the deadline) can cause. Admins may set any status.
CUSTOMER_TRANSITIONS = {
    PaymentStatus.pending: [PaymentStatus.in_progress, PaymentStatus.expired],
    PaymentStatus.in_progress: [],
    PaymentStatus.paid: [],
    PaymentStatus.expired: [],
    PaymentStatus.cancelled: [],
}

STATUS_LABELS = {
    PaymentStatus.pending: "Pending",
    PaymentStatus.in_progress: "Progress",
    PaymentStatus.paid: "Paid",
    PaymentStatus.expired: "Expired",
    PaymentStatus.cancelled: "Cancel",
}
