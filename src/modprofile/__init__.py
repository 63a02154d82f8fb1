"""
modprofile - versioned mod profile configuration.

This package provides the persistence model for mod profiles and folders,
the migration engine that upgrades older mod data files, and the operations
used to edit profiles and compute load order.
"""

__version__ = "0.2.0"
