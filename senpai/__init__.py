"""senpai: an AI assistant for the terminal."""
