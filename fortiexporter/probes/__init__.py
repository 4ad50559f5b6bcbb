"""Probes that turn FortiOS API answers into metrics."""

__all__ = ["bgp", "license", "logs", "ospf", "switch"]