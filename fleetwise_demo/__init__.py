"""AWS IoT FleetWise demo infrastructure."""

__version__ = "0.1.0"
