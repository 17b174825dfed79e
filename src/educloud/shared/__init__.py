"""
Shared Layer - Cross-Cutting Concerns
Logging, client exceptions, and session storage
"""
