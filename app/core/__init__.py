"""Core configuration for the registry extraction API."""
