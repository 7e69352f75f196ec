"""Core domain of neo-jwt: constants, exceptions, value objects, entities
and protocols. Nothing here performs cryptography or I/O.
"""
