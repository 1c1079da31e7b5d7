"""Commons package - shared settings, telemetry and infrastructure."""
