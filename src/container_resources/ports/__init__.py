"""Ports: interfaces offered by (inbound) and required by (outbound) the managers."""
