"""Exporters of the analyzed service model."""
