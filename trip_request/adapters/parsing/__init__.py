"""Plan parsing adapters - Implementations of TripPlanParserPort."""

from .itinerary_parser import ItineraryParser

__all__ = ["ItineraryParser"]
