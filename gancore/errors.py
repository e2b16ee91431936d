"""Exception types raised by the adversarial training core.

Both concrete errors subclass ValueError so callers that validate
configuration the usual way (``except ValueError``) still catch them.
"""


class GANError(Exception):
    """Base class for errors raised by gancore."""


class ConfigurationError(GANError, ValueError):
    """Invalid model/policy configuration.

    Raised for networks without learnable weights, policy settings that
    cannot work (e.g. WGAN without a clipping bound), and operations the
    selected policy does not support.
    """


class DimensionMismatchError(GANError, ValueError):
    """Training data shape is not usable with the requested batch size."""
