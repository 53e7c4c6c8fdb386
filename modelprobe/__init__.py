"""ModelProbe - endpoint validation and model discovery for AI provider APIs."""

__version__ = "0.1.0"
