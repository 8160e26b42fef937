"""Steve - bootstrap a bare-metal Kubernetes cluster."""

__version__ = "0.1.0"
