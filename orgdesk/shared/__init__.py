"""Shared helpers with no dependency on domain or infrastructure."""
