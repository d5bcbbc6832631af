"""
chainkit - Prioritized Middleware Chains for Starlette Handlers

An ASGI service core that decorates a terminal request handler with an
ordered, mutable set of named middlewares, rebuilt and swapped atomically
while requests are in flight.
"""

__version__ = "0.1.0"
