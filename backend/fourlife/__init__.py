"""4-Life lab API: runs Web4 simulation scripts and serves their JSON artifacts."""
