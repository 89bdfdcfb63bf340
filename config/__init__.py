"""Runtime configuration: settings and scoring weights."""
