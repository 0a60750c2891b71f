"""Infrastructure — persistence, templating and logging implementations."""
