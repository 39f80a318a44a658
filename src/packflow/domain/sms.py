"""SMS notification domain service."""

import logging
import re
from abc import ABC, abstractmethod

from packflow.domain.entities import Payment, SmsResult
from packflow.domain.payment import payment_request_message
from packflow.domain.errors import (
    ValidationError,
    invalid_phone_number,
    message_too_long,
)

logger = logging.getLogger(__name__)

MAX_MESSAGE_LENGTH = 1600
UK_MOBILE_PATTERN = re.compile(r"^(\+44|0044|0)7\d{9}$")


def normalize_uk_mobile(number: str) -> str:
    """Normalize a UK mobile number to international digits (447...).

    Accepts 07..., +447... and 00447... with any whitespace.

    Raises:
        ValidationError: If the number is not a UK mobile number
    """
    cleaned = re.sub(r"\s+", "", number or "")
    match = UK_MOBILE_PATTERN.match(cleaned)
    if match is None:
        raise ValidationError(invalid_phone_number(number))
    return "44" + cleaned[len(match.group(1)):]


def mask_destination(destination: str) -> str:
    """Hide all but the first five digits of a destination for logs."""
    return f"{destination[:5]}***"


class SmsGateway(ABC):
    """Outbound SMS transport."""

    @abstractmethod
    def send(self, destination: str, message: str) -> SmsResult:
        """Send a message to an international-format destination.

        Raises:
            SmsGatewayError: If the gateway rejects or fails the request
        """
        pass


class SmsService:
    """Validates and relays SMS notifications. Failures are never retried."""

    def __init__(self, gateway: SmsGateway):
        self.gateway = gateway

    def send(self, recipient: str, message: str) -> SmsResult:
        """Send a message to a UK mobile number.

        Raises:
            ValidationError: If recipient or message is missing or invalid
            SmsGatewayError: If the gateway fails
        """
        if not recipient or not message:
            raise ValidationError("Recipient and message are required")
        if len(message) > MAX_MESSAGE_LENGTH:
            raise ValidationError(message_too_long(len(message), MAX_MESSAGE_LENGTH))

        destination = normalize_uk_mobile(recipient)
        result = self.gateway.send(destination, message)
        logger.info("SMS sent to %s", mask_destination(destination))
        return result

    def notify_payment_request(self, payment: Payment) -> SmsResult:
        """Tell the client of a payment about the new request."""
        if not payment.client_phone:
            raise ValidationError(f"Payment {payment.id} has no client phone number")
        return self.send(payment.client_phone, payment_request_message(payment))
