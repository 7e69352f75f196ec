"""Infrastructure for neo-jwt: serializers, in-memory caches and stores,
and revocation registries.
"""
