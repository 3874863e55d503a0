"""Building blocks of a storage engine for events and time-series data.

It provides cloud and storage settings, partition file names,
crash-recovery rules, partition locks, service requests and interval
gap filling.
"""

__version__ = "0.1.0"