"""
Core package for the Frytopia recipe pages.

This package contains:
- models: Recipe, favorite, rating and user schemas
- pipeline: Search, sort and pagination of recipe listings
- ratings: Average rating and star helpers
- client: REST backend client
- views: Concurrent fetch-and-merge for each page
- validation: Local checks before any write
"""
