"""Metrics for FortiGate firewalls, collected over the FortiOS REST API."""

__version__ = "0.1.0"