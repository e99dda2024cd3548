"""Core package of SecureDB: document store, events, storage primitives."""
