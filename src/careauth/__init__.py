"""careauth: role hierarchy and permission resolution."""
