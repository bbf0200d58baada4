"""Request middleware: logging, timing, JWT parsing, permissions, rate limits."""
