"""Pure domain types: endpoints, timeouts, errors, session lifecycle."""
