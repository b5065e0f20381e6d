"""Kernel – error hierarchy shared by every logship layer."""
