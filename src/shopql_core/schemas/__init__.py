"""Pydantic models for Shopify responses."""
