"""Mission42 chat server: guides a user to a satellite constellation and creates it."""
