"""Observability – internal logging and host context providers."""
