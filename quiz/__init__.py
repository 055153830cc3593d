"""Quiz session core: question bank, session memory, validation and the relay service."""
