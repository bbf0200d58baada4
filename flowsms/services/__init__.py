"""Business logic. Blueprints stay thin and call into these modules."""
