"""Business rules of the Matchup backend, one module per concern"""
