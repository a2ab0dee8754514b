"""Light Waves reveal API."""
