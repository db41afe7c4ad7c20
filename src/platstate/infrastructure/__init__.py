"""Infrastructure layer — configuration tree, backends, key/value codec, locking."""
