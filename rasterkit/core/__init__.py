"""
Core modules for rasterkit

- engine: Pillow-backed raster handle and primitives
- orientation, geometry, tone, compositor, red_eye, optimizer: transforms
- image: the Image facade tying them together
"""
