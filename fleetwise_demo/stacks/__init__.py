from .fleetwise_demo_stack import FleetwiseDemoStack
from .fleetwise_obd_demo_stack import FleetwiseObdDemoStack

__all__ = ["FleetwiseDemoStack", "FleetwiseObdDemoStack"]
