"""Adapters layer - Concrete implementations of ports.

This module contains implementations of the port interfaces,
connecting the coordinator to external systems like:
- Geocoding services (Nominatim)
- The trip-planning web service (HTTP/JSON)
- Plan parsing (itinerary JSON)
- Map overlays (Folium)
- Timers (asyncio, manual clock)
- Message surfaces (logging)
- Caching systems (in-memory)
"""
