"""Club court booking core: weighted lottery allocation of courts."""
