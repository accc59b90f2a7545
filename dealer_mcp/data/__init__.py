"""Vehicle model, inventory store, dealer registry and the rule engine."""
