"""Cross-cutting concerns shared by the chain client and the HTTP server: configuration, logging and monitoring."""
