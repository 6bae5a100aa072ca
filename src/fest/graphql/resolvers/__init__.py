"""Resolver package for GraphQL schema.

Resolvers open their own database sessions and convert ORM rows into the
Strawberry types defined in ``fest.graphql.types``.
"""
