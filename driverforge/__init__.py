"""
driverforge
Finds which driver-description files in a driver-package tree claim a
given set of devices.
"""

__version__ = "0.2.0"
