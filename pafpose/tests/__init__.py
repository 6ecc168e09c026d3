"""
Tests module - Unit and integration tests for the pafpose package

Provides:
- Core module tests (config, topology, data model)
- Peak extraction tests
- Limb scoring and assembly tests
- End-to-end pipeline tests on synthetic maps
"""

__all__ = []
