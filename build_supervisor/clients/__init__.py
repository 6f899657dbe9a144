"""
Remote clients used by the check cycle.

The Drone queue is read over HTTP; the EC2 instance is described, started and
stopped through the AWS control plane.
"""

from .instance import Ec2InstanceClient
from .queue import DroneQueueClient

__all__ = ["DroneQueueClient", "Ec2InstanceClient"]
