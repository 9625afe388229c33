"""
Custom Exception Classes for the Feed Sync Client

This module defines custom exceptions for better error handling and
categorization of failures across the application.
"""


class FeedClientError(Exception):
    """Base exception for all Feed Sync Client errors."""
    pass


# =============================================================================
# Configuration Errors
# =============================================================================

class ConfigurationError(FeedClientError):
    """Raised when configuration validation fails or required settings are missing."""
    pass


# =============================================================================
# Session Errors
# =============================================================================

class AuthenticationError(FeedClientError):
    """Raised when the auth provider rejects a sign-in, sign-up or sign-out."""
    pass


# =============================================================================
# Remote API Errors
# =============================================================================

class RemoteAPIError(FeedClientError):
    """Base exception for failures talking to the GraphQL backend."""
    pass


class QueryError(RemoteAPIError):
    """Raised when a GraphQL operation returns errors or no data."""
    pass


class MutationError(RemoteAPIError):
    """Raised when a create/delete mutation does not return the expected row."""
    pass


class LikeResolutionError(RemoteAPIError):
    """Raised when the viewer's likes cannot be resolved for a set of posts."""
    pass


