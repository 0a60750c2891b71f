"""minipost — a minimal content server: create posts, render them back."""
