"""Test suite package marker so nested test modules get qualified names."""
