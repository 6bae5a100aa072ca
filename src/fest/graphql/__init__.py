"""GraphQL API for the Fest backend."""
