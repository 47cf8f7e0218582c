"""dutydesk: duty and task lifecycle engine for fuel-station back offices."""

__version__ = "0.1.0"
