"""Sample space model, filter training helpers, tracker settings, a stopwatch and shortest float-to-text conversion."""

__version__ = "0.1.0"

__all__ = [
    "dtoa_format",
    "dtoa_grisu",
    "json_types",
    "parameters",
    "sample_space",
    "timer",
    "train_filter",
]