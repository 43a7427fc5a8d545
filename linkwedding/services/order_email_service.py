from linkwedding.config import settings
from linkwedding.models.order import Order
from linkwedding.services.email_service import send_email
from linkwedding.utils.template import render_template


def invoice_url(order: Order) -> str:
    return f"{settings.BASE_URL.rstrip('/')}/invoice/{order.id}"


def send_order_confirmation_email(order: Order) -> bool:
    """Tell the customer their order exists and when payment is due."""
    html = render_template(
        "emails/order_confirmation.html",
        order=order,
        store_name=settings.STORE_NAME,
        invoice_url=invoice_url(order),
    )

    return send_email(
        to=order.customer_email,
        subject=f"Pesanan Anda - {order.invoice_number}",
        html=html,
    )


def send_payment_proof_notification(order: Order) -> bool:
    """Tell the admins a customer uploaded a payment proof."""
    if not settings.ADMIN_EMAILS:
        return False

    html = render_template(
        "emails/payment_proof_notification.html",
        order=order,
        store_name=settings.STORE_NAME,
    )

    return send_email(
        to=settings.ADMIN_EMAILS,
        subject=f"[Bukti Bayar] Invoice #{order.invoice_number} - {order.customer_name}",
        html=html,
    )
