"""Core configuration, logging, error taxonomy and service wiring."""
