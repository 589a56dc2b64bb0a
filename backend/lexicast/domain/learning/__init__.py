"""Learning domain layer."""
