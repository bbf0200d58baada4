"""Core exception types shared by services and blueprints."""
