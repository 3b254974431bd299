from .initialize_listing import InitialListingState, initialize_listing

__all__ = ["InitialListingState", "initialize_listing"]
