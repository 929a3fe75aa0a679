"""
Ordering Service — Confirmation email resend

Lets the success page (or an operator) send the confirmation for an order it
already holds, independent of the payment webhook.
"""
from fastapi import APIRouter, Depends, HTTPException, status

from ordering.api.deps import get_notifier
from ordering.schemas.order import ConfirmationEmailRequest, ConfirmationEmailResponse
from ordering.services.notifier import EmailNotifier

router = APIRouter(tags=["notifications"])


@router.post("/send-confirmation-email", response_model=ConfirmationEmailResponse)
async def send_confirmation_email(
    payload: ConfirmationEmailRequest,
    notifier: EmailNotifier = Depends(get_notifier),
):
    sent = await notifier.send_confirmation(
        payload.customer_email,
        payload.order_number,
        [item.model_dump(mode="json") for item in payload.items],
        payload.total,
        customer_name=payload.customer_name,
        subtotal=payload.subtotal,
        delivery_fee=payload.delivery_fee,
        special_instructions=payload.special_instructions,
    )
    if not sent:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to send email.")
    return ConfirmationEmailResponse()
