from .listing_factory import create_users_listing

__all__ = ["create_users_listing"]
