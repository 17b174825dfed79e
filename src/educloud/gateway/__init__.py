"""
Outbound HTTP gateway for the EduCloud API.
"""
from educloud.gateway.client import HttpGateway
from educloud.gateway.demo import DEMO_TOKEN
from educloud.gateway.navigator import Navigator, RecordingNavigator

__all__ = ["HttpGateway", "DEMO_TOKEN", "Navigator", "RecordingNavigator"]
