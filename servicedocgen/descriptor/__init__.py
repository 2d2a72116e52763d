"""Descriptor models of documented services."""
