"""
Infrastructure package for the dStruct pipeline.

This package contains infrastructure components including data access, logging,
command line configuration, and other cross-cutting concerns.
"""
