"""Exceptions raised by driverforge."""


class DriverForgeError(Exception):
    """Base class for every error the CLI reports to the operator."""


class DeviceListError(DriverForgeError):
    """Device list text could not be turned into (name, pattern) pairs."""


class CacheFormatError(DriverForgeError):
    """A persisted cache line is missing its separator."""


class DriverRootError(DriverForgeError):
    """The driver-package root is missing when a rebuild is needed."""
