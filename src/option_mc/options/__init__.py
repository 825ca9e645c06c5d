"""Option payoffs, simulation and analytical reference pricing."""
