"""Adapters: HTTP, files and the GeoSite binary format."""
