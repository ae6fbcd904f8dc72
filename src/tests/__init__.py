"""Test suite for pocketgraph."""
