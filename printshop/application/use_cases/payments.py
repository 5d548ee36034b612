import logging
import secrets

from printshop.application.dto import PaymentInput, PaymentOutput
from printshop.application.ports import PaymentGateway, PaymentRequest, UnitOfWork
from printshop.application.use_cases.operations import operation
from printshop.domain.access import Action, ResourceKind, authorize
from printshop.domain.errors import ConflictError, NotFoundError
from printshop.domain.order import OrderStatus, Payment
from printshop.domain.user import Actor

logger = logging.getLogger(__name__)


class PaymentService:
    def __init__(self, uow: UnitOfWork, gateway: PaymentGateway):
        self.uow = uow
        self.gateway = gateway

    @operation("create payment")
    def create_payment(self, actor: Actor, input: PaymentInput) -> PaymentOutput:
        with self.uow:
            order = authorize(actor, ResourceKind.ORDER, self.uow.orders.get(input.order_id), Action.READ)
        if order.status is not OrderStatus.PENDING:
            raise ConflictError(f"Order is {order.status.value}, payment cannot be created")

        # ゲートウェイ呼び出しはトランザクションの外で行う (タイムアウトはアダプター側)
        receipt = self.gateway.create_payment(PaymentRequest(
            order_no=str(order.id),
            ref_no=secrets.token_hex(6),
            product_detail=input.product_detail,
            customer_email=input.customer_email,
            currency_code=input.currency_code,
            total=order.total,
            lang=input.lang,
            channel=input.channel,
        ))

        payment = Payment(
            order_id=order.id,
            ref_no=receipt.ref_no,
            product_detail=receipt.product_detail,
            customer_email=receipt.customer_email,
            currency_code=receipt.currency_code,
            total=order.total,
            channel=receipt.channel,
            lang=receipt.lang,
        )
        with self.uow:
            order = self.uow.orders.get(order.id)
            if order is None:
                raise NotFoundError("Order not found")
            self.uow.payments.add(payment)
            self.uow.orders.update(order.await_payment(payment.id))
            self.uow.commit()
        logger.info("Payment %s created for order %s (status %s)", payment.id, order.id, receipt.status)
        return PaymentOutput(
            payment_id=payment.id,
            redirect_url=receipt.redirect_url,
            status=receipt.status,
            status_name=receipt.status_name,
        )
