"""The SMS Works HTTP gateway."""

import logging
from typing import Optional

import httpx

from packflow.domain.entities import SmsResult
from packflow.domain.errors import ConfigurationError, SmsGatewayError
from packflow.domain.sms import SmsGateway, mask_destination

logger = logging.getLogger(__name__)

SMSWORKS_API_URL = "https://api.thesmsworks.co.uk/v1/message/send"


class SmsWorksGateway(SmsGateway):
    """Sends messages through The SMS Works REST API."""

    def __init__(
        self,
        jwt: Optional[str],
        sender: str = "PackFlow",
        client: Optional[httpx.Client] = None,
        api_url: str = SMSWORKS_API_URL,
        timeout: float = 10.0,
    ):
        """Initialize the gateway.

        Args:
            jwt: API token sent verbatim in the Authorization header
            sender: Sender name shown on the handset
            client: Optional preconfigured httpx client
            api_url: Message send endpoint
            timeout: Request timeout in seconds

        Raises:
            ConfigurationError: If no token is configured
        """
        if not jwt:
            raise ConfigurationError("SMS service not configured: set SMSWORKS_JWT")
        self.jwt = jwt
        self.sender = sender
        self.api_url = api_url
        self.client = client or httpx.Client(timeout=timeout)

    def send(self, destination: str, message: str) -> SmsResult:
        """Send one message. Errors are raised, not retried."""
        try:
            response = self.client.post(
                self.api_url,
                headers={"Authorization": self.jwt, "Content-Type": "application/json"},
                json={
                    "sender": self.sender,
                    "destination": destination,
                    "content": message,
                    "schedule": "",
                },
            )
        except httpx.HTTPError as e:
            logger.error("SMS Works request to %s failed: %s", mask_destination(destination), e)
            raise SmsGatewayError("Failed to send SMS. Please try again later.") from e

        try:
            payload = response.json()
        except ValueError:
            payload = {}
        if not isinstance(payload, dict):
            payload = {}

        if response.is_error:
            logger.error("SMS Works API error %s: %s", response.status_code, payload)
            raise SmsGatewayError(
                payload.get("message") or "Failed to send SMS",
                status_code=response.status_code,
                details=payload.get("errors"),
            )

        return SmsResult(
            message_id=payload.get("messageid"),
            status=payload.get("status"),
            credits=payload.get("credits"),
        )

    def close(self) -> None:
        self.client.close()
