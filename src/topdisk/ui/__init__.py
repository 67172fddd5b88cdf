"""Terminal collaborators: keyboard input and render surfaces."""
