"""Settings, logging, error codes and result values."""
