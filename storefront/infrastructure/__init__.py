"""Infrastructure components: outbound HTTP, upstream authentication and caching."""
