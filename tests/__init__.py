"""
Test suite for PyFastResample package.

This test suite covers:
- Import tests for all modules and submodules
- Unit tests for buffers, the field pool and each sampler
- Integration tests for complete resize workflows

Run with: pytest
"""
