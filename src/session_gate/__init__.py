"""Session Gate - blocking request resolution for agent session trees."""
