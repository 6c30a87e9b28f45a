"""Transport layer — the scanning wrapper around MCP client transports."""

from promptshield.transport.scanning import ScanningClientTransport, TransportState

__all__ = ["ScanningClientTransport", "TransportState"]
