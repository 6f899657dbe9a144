"""
Build Supervisor - CI build queue driven instance supervisor

Keeps a cloud compute instance running only while the Drone CI build queue
has work for it, and stops (optionally hibernates) it once the queue drains.
"""

__version__ = "0.1.0"
__author__ = "Build Supervisor Team"
