"""Test package for patrol-zones.

This package contains:
- Unit tests (test_points.py, test_kmeans.py, test_geometry.py, test_hierarchy.py)
- Configuration tests (test_config_loader.py)
- Integration tests (test_integration.py)
- Shared fixtures (conftest.py)
"""
