"""Networked play: room storage and the REST service."""
