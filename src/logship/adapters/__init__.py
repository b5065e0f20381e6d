"""Adapters – HTTP transport and stdlib logging integration."""
