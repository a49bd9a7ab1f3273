"""Xray cloud API integration."""

from xray_bridge.xray.client import XrayClient
from xray_bridge.xray.models import ImportResult

__all__ = ["ImportResult", "XrayClient"]
