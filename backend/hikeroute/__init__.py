"""
hikeroute - route ingestion and analysis engine for guided hiking tours.
"""

__version__ = "0.1.0"
