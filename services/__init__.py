"""
Service layer for AWIS requests.

This module separates credential resolution, request signing and the
HTTP round trip from the Lambda handlers that use them.
"""
