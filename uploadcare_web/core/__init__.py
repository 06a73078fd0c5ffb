"""
Core logic for Uploadcare file groups.

This package is framework-agnostic - it doesn't import FastAPI,
requests, or any infrastructure concerns.
"""
