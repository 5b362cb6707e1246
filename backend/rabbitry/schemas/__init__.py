"""Pydantic schemas forming the HTTP contract."""
