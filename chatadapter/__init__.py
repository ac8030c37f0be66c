"""Models, configuration, logging and tool-call parsing for a chat completion adapter."""

__version__ = "0.1.0"