"""Per-RNTI modulation and MCS table tracking, uplink grant scheduling and reporting for LTE traffic analysis."""

__version__ = "0.1.0"