"""Schemas — Pydantic models for API request/response boundaries."""
