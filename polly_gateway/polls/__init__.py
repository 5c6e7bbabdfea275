"""Poll references and owner-only poll actions."""
