"""Post-allocation analysis of finished schedules."""
