"""
EduCloud client: sessions, gateway and resource stores for the EduCloud API.
"""
from educloud.client import EduCloudClient

__version__ = "1.0.0"

__all__ = ["EduCloudClient", "__version__"]
