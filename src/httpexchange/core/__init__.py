"""
Connection-side collaborators.

Responders turn an HTTPResponse into bytes on a live connection (or in a
buffer).
"""

from .responder import BufferResponder, ConnectionState, Responder, SocketResponder

__all__ = ["Responder", "SocketResponder", "BufferResponder", "ConnectionState"]
