"""Capped-rate frame presentation loop on wgpu."""
