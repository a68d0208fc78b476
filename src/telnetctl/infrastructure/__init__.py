"""Infrastructure layer: sockets, console streams, and the relay."""
