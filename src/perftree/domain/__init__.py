"""Domain logic: positions, perft results and their comparison."""
