"""OSC mirroring of the camera surface."""
