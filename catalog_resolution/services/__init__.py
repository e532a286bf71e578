"""Catalog resolution services: normalization, brands, matching, classification."""
