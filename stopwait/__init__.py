"""Stop-and-wait link simulation with byte stuffing, parity and injected channel errors."""

__version__ = "0.1.0"
__all__ = ["descriptor", "framing", "kernel", "message", "network", "receiver", "sender"]