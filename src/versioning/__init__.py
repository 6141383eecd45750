"""Version constraint parsing, resolution and manifest resolution."""
