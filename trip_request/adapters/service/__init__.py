"""Trip-planning service adapters - Implementations of TripPlannerServicePort.

Available implementations:
- OTPServiceClient: HTTP/JSON client for an OpenTripPlanner-style plan endpoint
"""

from .otp_client import OTPServiceClient

__all__ = ["OTPServiceClient"]
