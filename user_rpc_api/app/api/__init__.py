"""
API package.

``rpc`` exposes the user procedures under a single path; ``health``
provides a liveness check.
"""
