"""Weather activity agent: Open-Meteo tools, recommendation engines and evaluation scorers."""
