"""pygame front-end: draws the grid, forwards clicks to the editor, runs searches."""
