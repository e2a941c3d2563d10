"""Game services: combat, monster AI, the turn engine and score stores."""
