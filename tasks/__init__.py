"""Benchmark tasks for evolab experiments."""
