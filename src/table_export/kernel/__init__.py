"""Kernel – primitives shared by every layer."""
