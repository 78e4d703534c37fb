"""Out-of-process batch jobs."""
