"""
Preference learning layer.

Responsibilities:
- Keep durable weighted maps of the categories and price tiers a user picks.
- Reinforce a weight by one every time the user actively chooses a value.
- Recover silently from missing or corrupt persisted state.
- Never fail the browsing flow: every storage error is logged and absorbed.
"""
