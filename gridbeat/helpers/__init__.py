"""Optional integrations that are not part of the gridbeat core."""
