"""HTTP API for topics, stances, matchmaking and debates."""
