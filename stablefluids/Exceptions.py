"""Exception types raised by the fluid simulation."""


class FluidError(Exception):
    """Base class for all simulation errors."""


class ConfigError(FluidError, ValueError):
    """A configuration value is missing, unknown or outside its valid range."""


class KernelLoadError(FluidError):
    """A kernel program could not be found, read or compiled."""


class BackendError(FluidError):
    """The compute backend failed to allocate a resource or execute a dispatch."""
