"""
Service layer.

Each service encapsulates business logic for a domain and receives its
store and external clients at construction, so API handlers never talk
to storage or Stripe directly.
"""
