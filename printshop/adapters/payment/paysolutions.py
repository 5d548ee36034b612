import logging

import requests

from printshop.application.ports import PaymentGateway, PaymentReceipt, PaymentRequest
from printshop.domain.errors import PaymentGatewayError

logger = logging.getLogger(__name__)


class PaySolutionsGateway(PaymentGateway):
    """HTTP client for the e-payment link endpoint."""

    def __init__(
        self,
        url: str,
        merchant_id: str,
        merchant_secret_key: str,
        api_key: str,
        timeout: float = 10.0,
        session: requests.Session | None = None,
    ):
        self.url = url
        self.merchant_id = merchant_id
        self.merchant_secret_key = merchant_secret_key
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or requests.Session()

    def create_payment(self, request: PaymentRequest) -> PaymentReceipt:
        if not self.merchant_id or not self.merchant_secret_key or not self.api_key:
            raise PaymentGatewayError("Payment configuration is missing")

        payload = {
            "orderNo": request.order_no,
            "refNo": request.ref_no,
            "productDetail": request.product_detail,
            "customeremail": request.customer_email,
            "cc": request.currency_code,
            "total": request.total,
            "lang": request.lang,
            "channel": request.channel,
        }
        headers = {
            "merchantId": self.merchant_id,
            "merchantSecretKey": self.merchant_secret_key,
            "apikey": self.api_key,
            "Content-Type": "application/json",
        }

        logger.info("Creating payment for order %s (ref %s)", request.order_no, request.ref_no)
        try:
            response = self.session.post(self.url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            logger.error("Payment gateway timed out for order %s", request.order_no)
            raise PaymentGatewayError("Payment gateway timed out") from e
        except (requests.RequestException, ValueError) as e:
            logger.error("Payment gateway request failed for order %s: %s", request.order_no, e)
            raise PaymentGatewayError("Failed to create payment") from e

        payment_data = data[0] if isinstance(data, list) and data else None
        if not isinstance(payment_data, dict):
            logger.error("Invalid response from payment gateway: %s", str(data)[:200])
            raise PaymentGatewayError("Invalid response from payment gateway")

        try:
            return PaymentReceipt(
                order_no=str(payment_data["OrderNo"]),
                ref_no=str(payment_data["ReferenceNo"]),
                product_detail=str(payment_data.get("ProductDetail", request.product_detail)),
                customer_email=str(payment_data.get("CustomerEmail", request.customer_email)),
                currency_code=str(payment_data.get("CurrencyCode", request.currency_code)),
                total=float(payment_data.get("Total", request.total)),
                lang=str(payment_data.get("Lang", request.lang)),
                channel=str(payment_data.get("Channel", request.channel)),
                redirect_url=str(payment_data.get("PostBackUrl", "")),
                status=str(payment_data.get("Status", "")),
                status_name=str(payment_data.get("StatusName", "")),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise PaymentGatewayError("Invalid response from payment gateway") from e
