"""CLI helper for building the SMS service."""

from __future__ import annotations

import click

from packflow.domain.sms import SmsService
from packflow.gateways.smsworks import SmsWorksGateway


def build_sms_service(ctx: click.Context) -> SmsService:
    """Build an SmsService from the CLI context.

    A gateway placed in ``ctx.obj["sms_gateway"]`` takes precedence over the
    configured SMS Works gateway.

    Raises:
        ConfigurationError: If no gateway is given and SMSWORKS_JWT is not set
    """
    gateway = ctx.obj.get("sms_gateway")
    if gateway is None:
        settings = ctx.obj["settings"]
        gateway = SmsWorksGateway(settings.smsworks_jwt, sender=settings.smsworks_sender)
        ctx.obj["sms_gateway"] = gateway
        ctx.call_on_close(gateway.close)
    return SmsService(gateway)
