"""Webhook receiver for hosted-database change notifications."""

from logistx.webhook.server import create_app

__all__ = ["create_app"]
