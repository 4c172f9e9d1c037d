"""Infrastructure layer — filesystem access to markdown notes.

This is the only layer that touches the disk. It plays the note metadata
provider for the domain: frontmatter, body text, and inline tags.
"""
