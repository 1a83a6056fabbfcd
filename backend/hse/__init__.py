"""HSE record management backend."""
